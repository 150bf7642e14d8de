"""
Generation plan: language-neutral trees describing the two generated types.

Generators build these nodes, emitters walk them. Nothing in here knows any
concrete syntax. Every node is a frozen dataclass; bodies are tuples.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union

from .schema import FieldCategory, OptionalWrapper


# ---------------------------------------------------------------------------
# Type references
# ---------------------------------------------------------------------------


class TypeRefKind(Enum):
    """How a type reference relates to a field category."""

    FIELD = "field"              # the declared field type
    ELEMENT = "element"          # collection/set/array element, optional inner
    KEY = "key"
    VALUE = "value"
    SAME = "same"                # List/Set of subtypes of the element
    COLLECTION = "collection"    # Collection of subtypes
    ITERABLE = "iterable"
    ITERATOR = "iterator"
    VARARGS = "varargs"
    MAP = "map"                  # Map of key/value subtypes
    ENTRY = "entry"              # Map entry of key/value subtypes
    OPTIONAL = "optional"        # wrapper of subtypes
    TARGET = "target"
    BUILDER = "builder"
    VALUE_TYPE = "value_type"
    OBJECT = "object"
    BOOLEAN = "boolean"
    INT = "int"
    STRING = "string"


@dataclass(frozen=True)
class TypeRef:
    kind: TypeRefKind
    category: Optional[FieldCategory] = None


OBJECT = TypeRef(TypeRefKind.OBJECT)
BOOLEAN = TypeRef(TypeRefKind.BOOLEAN)
INT = TypeRef(TypeRefKind.INT)
STRING = TypeRef(TypeRefKind.STRING)
TARGET = TypeRef(TypeRefKind.TARGET)
BUILDER = TypeRef(TypeRefKind.BUILDER)
VALUE_TYPE = TypeRef(TypeRefKind.VALUE_TYPE)


def ref(kind: TypeRefKind, category: FieldCategory) -> TypeRef:
    return TypeRef(kind, category)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class EqualityRule(Enum):
    PRIMITIVE = "primitive"      # direct comparison
    FLOAT_BITS = "float_bits"    # canonical 32-bit compare
    DOUBLE_BITS = "double_bits"  # canonical 64-bit compare
    ARRAY_DEEP = "array_deep"
    NULL_SAFE = "null_safe"      # structural equals, absent-aware


class HashRule(Enum):
    BOOLEAN = "boolean"          # 1231 / 1237
    WIDEN = "widen"              # byte, short, char to int
    INT = "int"
    LONG_FOLD = "long_fold"
    FLOAT_BITS = "float_bits"
    DOUBLE_FOLD = "double_fold"
    ARRAY_DEEP = "array_deep"
    STRUCTURAL = "structural"    # hashCode or 0


class StringRule(Enum):
    DEFAULT = "default"
    ARRAY_ELEMENTS = "array_elements"


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class This:
    pass


@dataclass(frozen=True)
class SelfField:
    """The storage slot of a field on the current instance."""

    name: str


@dataclass(frozen=True)
class FieldOf:
    """Direct storage access on another instance of the same type."""

    target: "Expr"
    name: str


@dataclass(frozen=True)
class GetterCall:
    target: "Expr"
    name: str


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class IsNull:
    expr: "Expr"
    negate: bool = False


@dataclass(frozen=True)
class Not:
    expr: "Expr"


@dataclass(frozen=True)
class Identical:
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Ternary:
    condition: "Expr"
    then: "Expr"
    otherwise: "Expr"


@dataclass(frozen=True)
class NewContainer:
    """A fresh mutable container for the category, optionally copied from ``source``."""

    category: FieldCategory
    source: Optional["Expr"] = None


@dataclass(frozen=True)
class EmptyContainer:
    """The shared empty immutable container for the category."""

    category: FieldCategory


@dataclass(frozen=True)
class UnmodifiableView:
    category: FieldCategory
    expr: "Expr"


@dataclass(frozen=True)
class OptionalEmpty:
    wrapper: OptionalWrapper


@dataclass(frozen=True)
class OptionalMaybe:
    wrapper: OptionalWrapper
    expr: "Expr"


@dataclass(frozen=True)
class Cast:
    type: TypeRef
    expr: "Expr"


@dataclass(frozen=True)
class IsInstance:
    type: TypeRef
    expr: "Expr"


@dataclass(frozen=True)
class Invoke:
    """Call a specific overload of a method on the current instance."""

    method: str
    overload: str
    args: Tuple["Expr", ...] = ()


@dataclass(frozen=True)
class IteratorOf:
    expr: "Expr"


@dataclass(frozen=True)
class VarargsAsList:
    expr: "Expr"


@dataclass(frozen=True)
class Construct:
    """Instantiate a generated type through one of its constructors."""

    type: TypeRef
    constructor: "ConstructorKind"
    args: Tuple["Expr", ...] = ()


@dataclass(frozen=True)
class EntryKey:
    entry: "Expr"


@dataclass(frozen=True)
class EntryValue:
    entry: "Expr"


@dataclass(frozen=True)
class FieldsDiffer:
    """True when this instance's field differs from ``other``'s getter value."""

    rule: EqualityRule
    name: str
    other: "Expr"


@dataclass(frozen=True)
class HashTerm:
    rule: HashRule
    name: str


@dataclass(frozen=True)
class StringPart:
    name: str
    rule: StringRule


@dataclass(frozen=True)
class StringTemplate:
    """Renders as ``<type_name>{a=<a>, b=<b>}``."""

    type_name: str
    parts: Tuple[StringPart, ...]


Expr = Union[
    Var, This, SelfField, FieldOf, GetterCall, Literal, IsNull, Not, Identical,
    Ternary, NewContainer, EmptyContainer, UnmodifiableView, OptionalEmpty,
    OptionalMaybe, Cast, IsInstance, Invoke, IteratorOf, VarargsAsList,
    Construct, EntryKey, EntryValue, FieldsDiffer, HashTerm, StringTemplate,
]


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Assign:
    target: Expr
    value: Expr


@dataclass(frozen=True)
class DeclareLocal:
    name: str
    type: TypeRef
    value: Expr


@dataclass(frozen=True)
class Return:
    value: Optional[Expr] = None


@dataclass(frozen=True)
class If:
    condition: Expr
    body: Tuple["Stmt", ...]


@dataclass(frozen=True)
class ThrowNullArgument:
    message: str


@dataclass(frozen=True)
class ForEach:
    item: str
    type: TypeRef
    iterable: Expr
    body: Tuple["Stmt", ...]


@dataclass(frozen=True)
class ForEachEntry:
    entry: str
    type: TypeRef
    mapping: Expr
    body: Tuple["Stmt", ...]


@dataclass(frozen=True)
class WhileIterator:
    """Drain ``iterator`` binding each element to ``item``."""

    iterator: Expr
    item: str
    type: TypeRef
    body: Tuple["Stmt", ...]


@dataclass(frozen=True)
class AddTo:
    container: Expr
    item: Expr


@dataclass(frozen=True)
class PutTo:
    container: Expr
    key: Expr
    value: Expr


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr


@dataclass(frozen=True)
class InitHash:
    """Start the running hash accumulator at 1."""

    name: str = "result"


@dataclass(frozen=True)
class HashAccumulate:
    """``result = 31 * result + term`` with 32-bit wrap-around."""

    term: HashTerm
    name: str = "result"


Stmt = Union[
    Assign, DeclareLocal, Return, If, ThrowNullArgument, ForEach, ForEachEntry,
    WhileIterator, AddTo, PutTo, ExprStmt, InitHash, HashAccumulate,
]


def null_check(expr: Expr, message: str) -> If:
    """``if expr is absent: raise NullArgument(message)``."""
    return If(IsNull(expr), (ThrowNullArgument(message),))


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


class TypeRole(Enum):
    VALUE = "value"
    BUILDER = "builder"


class ConstructorKind(Enum):
    DEFAULT = "default"
    COPY_VALUE = "copy_value"
    COPY_BUILDER = "copy_builder"
    VALUE = "value"


class MethodRole(Enum):
    GETTER = "getter"
    SETTER = "setter"
    OPTIONAL_RAW_SETTER = "optional_raw_setter"
    OPTIONAL_SETTER = "optional_setter"
    REPLACE = "replace"          # collection/set/map replace-style mutators
    PUT_ENTRIES = "put_entries"  # fixed-arity key/value overloads
    ADD_ITEM = "add_item"
    PUT_ITEM = "put_item"
    BUILD = "build"
    FROM_VALUE = "from_value"
    FROM_BUILDER = "from_builder"
    TO_BUILDER = "to_builder"
    EQUALS = "equals"
    HASH_CODE = "hash_code"
    TO_STRING = "to_string"


@dataclass(frozen=True)
class Param:
    name: str
    type: TypeRef


@dataclass(frozen=True)
class FieldDecl:
    name: str
    category: FieldCategory
    final: bool = False


@dataclass(frozen=True)
class ConstructorSpec:
    kind: ConstructorKind
    params: Tuple[Param, ...]
    body: Tuple[Stmt, ...]
    public: bool = False


@dataclass(frozen=True)
class MethodSpec:
    """
    One method (one overload) of a generated type.

    ``overload`` distinguishes overloads that share ``name``; it is unique
    within the name. ``field`` names the schema field the method serves.
    """

    name: str
    overload: str
    role: MethodRole
    params: Tuple[Param, ...]
    returns: Optional[TypeRef]
    body: Tuple[Stmt, ...]
    static: bool = False
    overrides: bool = False
    field: Optional[str] = None


@dataclass(frozen=True)
class TypeDefinition:
    name: str
    role: TypeRole
    fields: Tuple[FieldDecl, ...] = ()
    constructors: Tuple[ConstructorSpec, ...] = ()
    methods: Tuple[MethodSpec, ...] = ()
    implements: Optional[TypeRef] = None
    enclosing: Optional[str] = None
    public: bool = True

    def constructor(self, kind: ConstructorKind) -> ConstructorSpec:
        for ctor in self.constructors:
            if ctor.kind is kind:
                return ctor
        raise KeyError(kind)

    def methods_named(self, name: str) -> Tuple[MethodSpec, ...]:
        return tuple(m for m in self.methods if m.name == name)

    def method(self, name: str, overload: str) -> MethodSpec:
        for m in self.methods:
            if m.name == name and m.overload == overload:
                return m
        raise KeyError(f"{name}/{overload}")


@dataclass(frozen=True)
class GenerationPlan:
    """The two type definitions produced for one target."""

    package: str
    target_name: str
    builder: TypeDefinition
    value: TypeDefinition
    public: bool = True
    metadata: dict = field(default_factory=dict, compare=False, hash=False)

    @property
    def target_simple_name(self) -> str:
        return self.target_name.rsplit(".", 1)[-1]

    @property
    def qualified_target_name(self) -> str:
        return f"{self.package}.{self.target_name}" if self.package else self.target_name

    @property
    def builder_name(self) -> str:
        return self.builder.name
