"""
Core schema representation for code generation.

A validated target becomes a :class:`TypeSchema`: an ordered list of
:class:`FieldSchema` entries, each tagged with exactly one
:class:`FieldCategory`. Everything here is immutable once built.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .descriptors import TypeDescriptor


class CategoryKind(Enum):
    """Closed set of field categories."""

    SCALAR = "scalar"
    REFERENCE = "reference"
    ARRAY = "array"
    COLLECTION = "collection"
    SET = "set"
    MAP = "map"
    OPTIONAL = "optional"


class ScalarKind(Enum):
    """The eight primitive scalar kinds."""

    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    CHAR = "char"
    FLOAT = "float"
    DOUBLE = "double"


class Visibility(Enum):
    PUBLIC = "public"
    PACKAGE_PRIVATE = "package"


@dataclass(frozen=True)
class OptionalWrapper:
    """An optional wrapper type and the names of its two factory methods."""

    qualified_name: str
    empty_name: str
    maybe_name: str

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]


JAVA_OPTIONAL = OptionalWrapper("java.util.Optional", "empty", "ofNullable")
GUAVA_OPTIONAL = OptionalWrapper("com.google.common.base.Optional", "absent", "fromNullable")


@dataclass(frozen=True)
class FieldCategory:
    """
    Tagged union over :class:`CategoryKind`.

    ``type`` is always the declared field type. The payload attributes that
    are meaningful depend on ``kind``:

    - SCALAR: ``scalar_kind``
    - ARRAY, COLLECTION, SET: ``element``
    - MAP: ``key`` and ``value``
    - OPTIONAL: ``element`` (the wrapped type) and ``wrapper``
    """

    kind: CategoryKind
    type: TypeDescriptor
    scalar_kind: Optional[ScalarKind] = None
    element: Optional[TypeDescriptor] = None
    key: Optional[TypeDescriptor] = None
    value: Optional[TypeDescriptor] = None
    wrapper: Optional[OptionalWrapper] = None

    @classmethod
    def scalar(cls, type_: TypeDescriptor) -> "FieldCategory":
        return cls(CategoryKind.SCALAR, type_, scalar_kind=ScalarKind(type_.name))

    @classmethod
    def reference(cls, type_: TypeDescriptor) -> "FieldCategory":
        return cls(CategoryKind.REFERENCE, type_)

    @classmethod
    def array(cls, type_: TypeDescriptor) -> "FieldCategory":
        return cls(CategoryKind.ARRAY, type_, element=type_.component)

    @classmethod
    def collection(cls, type_: TypeDescriptor) -> "FieldCategory":
        return cls(CategoryKind.COLLECTION, type_, element=type_.args[0])

    @classmethod
    def set(cls, type_: TypeDescriptor) -> "FieldCategory":
        return cls(CategoryKind.SET, type_, element=type_.args[0])

    @classmethod
    def map(cls, type_: TypeDescriptor) -> "FieldCategory":
        return cls(CategoryKind.MAP, type_, key=type_.args[0], value=type_.args[1])

    @classmethod
    def optional(cls, type_: TypeDescriptor, wrapper: OptionalWrapper) -> "FieldCategory":
        return cls(CategoryKind.OPTIONAL, type_, element=type_.args[0], wrapper=wrapper)

    @property
    def is_container(self) -> bool:
        """Collection, set and map fields get container handling."""
        return self.kind in CONTAINER_KINDS

    @property
    def is_scalar(self) -> bool:
        return self.kind is CategoryKind.SCALAR

    def __str__(self) -> str:
        if self.kind is CategoryKind.SCALAR:
            return f"Scalar({self.scalar_kind.value})"
        if self.kind is CategoryKind.MAP:
            return f"Map({self.key}, {self.value})"
        if self.element is not None:
            return f"{self.kind.value.title()}({self.element})"
        return f"{self.kind.value.title()}({self.type})"


CONTAINER_KINDS = frozenset({CategoryKind.COLLECTION, CategoryKind.SET, CategoryKind.MAP})


@dataclass(frozen=True)
class FieldSchema:
    """One field of the generated type."""

    name: str
    category: FieldCategory
    nullable: bool = False

    @property
    def kind(self) -> CategoryKind:
        return self.category.kind


class SchemaError(ValueError):
    """Raised when a schema violates its structural invariants."""

    pass


@dataclass(frozen=True)
class TypeSchema:
    """
    A validated target, ready for planning.

    Field order is significant: it fixes constructor parameter order, hash
    accumulation order and string rendering order.
    """

    package: str
    target_name: str
    fields: Tuple[FieldSchema, ...] = ()
    visibility: Visibility = Visibility.PUBLIC
    supports_to_builder: bool = False
    generated_value_name: str = "Value"

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        seen = set()
        for field in self.fields:
            if field.name in seen:
                raise SchemaError(
                    f"Duplicate field '{field.name}' in {self.qualified_name}"
                )
            seen.add(field.name)

    @property
    def simple_name(self) -> str:
        return self.target_name.rsplit(".", 1)[-1]

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.target_name}" if self.package else self.target_name

    @property
    def generated_builder_name(self) -> str:
        return builder_name_for(self.simple_name)


def builder_name_for(simple_name: str) -> str:
    """Derive the builder type name from the target's simple name."""
    return f"{simple_name}Builder"
