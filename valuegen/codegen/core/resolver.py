"""
Type-resolution oracle.

Answers the questions the classifier and validator ask about a type:
which well-known shape it has, whether it resolves at all, and whether the
generated code can see it.
"""

from copy import copy
from enum import Enum
from typing import Dict, Iterable, Optional, Set

from .descriptors import TypeDescriptor, TypeKind
from .schema import GUAVA_OPTIONAL, JAVA_OPTIONAL, OptionalWrapper


class Shape(Enum):
    LIST = "list"
    SET = "set"
    MAP = "map"
    OPTIONAL = "optional"
    PRIMITIVE = "primitive"
    ARRAY = "array"


DEFAULT_SHAPES: Dict[Shape, Set[str]] = {
    Shape.LIST: {"java.util.List"},
    Shape.SET: {"java.util.Set"},
    Shape.MAP: {"java.util.Map"},
}

DEFAULT_WRAPPERS: Dict[str, OptionalWrapper] = {
    JAVA_OPTIONAL.qualified_name: JAVA_OPTIONAL,
    GUAVA_OPTIONAL.qualified_name: GUAVA_OPTIONAL,
}

# Type names visible without import from the java.lang package.
JAVA_LANG_TYPES = frozenset(
    {
        "Appendable", "AutoCloseable", "Boolean", "Byte", "CharSequence",
        "Character", "Class", "ClassLoader", "Cloneable", "Comparable",
        "Deprecated", "Double", "Enum", "Error", "Exception", "Float",
        "FunctionalInterface", "Integer", "Iterable", "Long", "Math",
        "Module", "Number", "Object", "Override", "Package", "Process",
        "ProcessBuilder", "Readable", "Record", "Runnable", "Runtime",
        "RuntimeException", "SafeVarargs", "SecurityManager", "Short",
        "StackTraceElement", "StrictMath", "String", "StringBuffer",
        "StringBuilder", "SuppressWarnings", "System", "Thread",
        "ThreadGroup", "ThreadLocal", "Throwable", "Void",
    }
)

_ALWAYS_KNOWN_PREFIXES = ("java.lang.", "java.util.")


class TypeResolver:
    """
    Read-only resolution context shared by all targets of a batch.

    Args:
        known_types: If given, declared types outside this set (and outside
            ``java.lang``/``java.util``) do not resolve
        inaccessible_types: Qualified names the generated code cannot see
        shape_aliases: Extra qualified names per shape name, e.g.
            ``{"list": ["com.acme.ImmutableList"]}``
        optional_wrappers: Extra optional wrappers keyed by qualified name
    """

    def __init__(
        self,
        known_types: Optional[Iterable[str]] = None,
        inaccessible_types: Iterable[str] = (),
        shape_aliases: Optional[Dict[str, Iterable[str]]] = None,
        optional_wrappers: Optional[Dict[str, OptionalWrapper]] = None,
    ):
        self.known_types = set(known_types) if known_types is not None else None
        self.inaccessible_types = set(inaccessible_types)
        self._shapes = {shape: set(names) for shape, names in DEFAULT_SHAPES.items()}
        for shape_name, names in (shape_aliases or {}).items():
            self._shapes.setdefault(Shape(shape_name), set()).update(names)
        self._wrappers = dict(DEFAULT_WRAPPERS)
        self._wrappers.update(optional_wrappers or {})

    def with_known_types(self, qualified_names: Iterable[str]) -> "TypeResolver":
        """A copy of this resolver that also resolves ``qualified_names``."""
        resolver = copy(self)
        if self.known_types is not None:
            resolver.known_types = self.known_types | set(qualified_names)
        return resolver

    def matches_shape(self, type_: TypeDescriptor, shape: Shape) -> bool:
        """Does ``type_`` have the given well-known shape?"""
        if shape is Shape.PRIMITIVE:
            return type_.kind is TypeKind.PRIMITIVE
        if shape is Shape.ARRAY:
            return type_.kind is TypeKind.ARRAY
        if type_.kind is not TypeKind.DECLARED:
            return False
        if shape is Shape.OPTIONAL:
            return type_.name in self._wrappers
        return type_.name in self._shapes.get(shape, ())

    def optional_wrapper(self, type_: TypeDescriptor) -> Optional[OptionalWrapper]:
        if type_.kind is not TypeKind.DECLARED:
            return None
        return self._wrappers.get(type_.name)

    def is_resolvable(self, type_: TypeDescriptor) -> bool:
        """True when the type and all of its arguments resolve."""
        if type_.kind is TypeKind.ERROR:
            return False
        if type_.kind is TypeKind.PRIMITIVE:
            return True
        if type_.kind is TypeKind.ARRAY:
            return self.is_resolvable(type_.component)
        if not all(self.is_resolvable(arg) for arg in type_.args):
            return False
        if self.known_types is None:
            return True
        return (
            type_.name in self.known_types
            or type_.name.startswith(_ALWAYS_KNOWN_PREFIXES)
            or type_.name in self._wrappers
            or any(type_.name in names for names in self._shapes.values())
        )

    def first_unresolved(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
        """Return the innermost part of ``type_`` that fails to resolve."""
        if type_.kind is TypeKind.ARRAY:
            return self.first_unresolved(type_.component)
        for arg in type_.args:
            culprit = self.first_unresolved(arg)
            if culprit is not None:
                return culprit
        return None if self.is_resolvable(type_) else type_

    def is_accessible(self, type_: TypeDescriptor) -> bool:
        if type_.kind is TypeKind.ARRAY:
            return self.is_accessible(type_.component)
        if type_.name in self.inaccessible_types:
            return False
        return all(self.is_accessible(arg) for arg in type_.args)

    def is_builtin_type_name(self, simple_name: str) -> bool:
        """Does ``java.lang.<simple_name>`` name a well-known built-in type?"""
        return simple_name in JAVA_LANG_TYPES
