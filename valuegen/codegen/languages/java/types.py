"""
Java-specific type rendering for code generation.

Turns type descriptors and plan type references into Java source text,
shortening names where the generated file can see them and recording the
imports that requires.
"""

from typing import Dict, Iterable, List, Optional, Set

from ...core.descriptors import TypeDescriptor, TypeKind
from ...core.plan import TypeRef, TypeRefKind
from ...core.schema import CategoryKind, FieldCategory

JAVA_LANG = "java.lang"
JAVA_UTIL = "java.util"

# Import groups, in order; anything else goes last.
IMPORT_GROUPS = ("java.", "javax.")

CONTAINER_CLASSES = {
    CategoryKind.COLLECTION: ("java.util.List", "java.util.ArrayList", "List"),
    CategoryKind.SET: ("java.util.Set", "java.util.HashSet", "Set"),
    CategoryKind.MAP: ("java.util.Map", "java.util.HashMap", "Map"),
}


class JavaTypeMapper:
    """
    Renders Java type names for one generated file.

    ``java.lang`` types and types of the file's own package are written by
    simple name; ``java.util`` types are imported. A simple name is only
    used for one qualified name per file, later claimants stay qualified.
    """

    def __init__(self, package: str, local_names: Optional[Dict[str, str]] = None):
        self.package = package
        self.imports: Set[str] = set()
        self._claimed: Dict[str, str] = dict(local_names or {})

    def _claim(self, simple: str, qualified: str) -> bool:
        owner = self._claimed.setdefault(simple, qualified)
        return owner == qualified

    def compress(self, qualified: str) -> str:
        """Shortest spelling of ``qualified`` valid in this file."""
        package, _, simple = qualified.rpartition(".")
        if not package:
            return qualified
        if package == JAVA_LANG and self._claim(simple, qualified):
            return simple
        if package == JAVA_UTIL and self._claim(simple, qualified):
            self.imports.add(qualified)
            return simple
        if self.package and qualified.startswith(self.package + "."):
            rest = qualified[len(self.package) + 1:]
            head = rest.split(".", 1)[0]
            if self._claim(head, f"{self.package}.{head}"):
                return rest
        return qualified

    def use(self, qualified: str) -> str:
        """Import ``qualified`` explicitly and return its simple name."""
        package, _, simple = qualified.rpartition(".")
        if not self._claim(simple, qualified):
            return qualified
        if package and package not in (JAVA_LANG, self.package):
            self.imports.add(qualified)
        return simple

    def type_name(self, type_: TypeDescriptor) -> str:
        if type_.kind is TypeKind.PRIMITIVE:
            return type_.name
        if type_.kind is TypeKind.ARRAY:
            return f"{self.type_name(type_.component)}[]"
        name = self.compress(type_.name)
        if type_.args:
            return f"{name}<{self.type_arguments(type_.args)}>"
        return name

    def type_arguments(self, args: Iterable[TypeDescriptor]) -> str:
        return ",".join(self.type_name(arg) for arg in args)

    def extended(self, args: Iterable[TypeDescriptor]) -> str:
        return ",".join(f"? extends {self.type_name(arg)}" for arg in args)

    def container_interface(self, category: FieldCategory) -> str:
        return self.compress(CONTAINER_CLASSES[category.kind][0])

    def container_class(self, category: FieldCategory) -> str:
        return self.compress(CONTAINER_CLASSES[category.kind][1])

    def type_ref(self, ref: TypeRef, names: Dict[TypeRefKind, str]) -> str:
        """
        Render a plan type reference.

        Args:
            ref: Reference to render
            names: Spellings of TARGET, BUILDER and VALUE_TYPE
        """
        kind, category = ref.kind, ref.category
        if kind in names:
            return names[kind]
        fixed = {
            TypeRefKind.OBJECT: "Object",
            TypeRefKind.BOOLEAN: "boolean",
            TypeRefKind.INT: "int",
            TypeRefKind.STRING: "String",
        }
        if kind in fixed:
            return fixed[kind]
        if kind is TypeRefKind.FIELD:
            return self.type_name(category.type)
        if kind is TypeRefKind.ELEMENT:
            return self.type_name(category.element)
        if kind is TypeRefKind.KEY:
            return self.type_name(category.key)
        if kind is TypeRefKind.VALUE:
            return self.type_name(category.value)
        if kind is TypeRefKind.VARARGS:
            return f"{self.type_name(category.element)}..."

        element_args = self._wildcard_args(category)
        if kind is TypeRefKind.SAME:
            return f"{self.container_interface(category)}<{element_args}>"
        if kind is TypeRefKind.COLLECTION:
            return f"{self.compress('java.util.Collection')}<{element_args}>"
        if kind is TypeRefKind.ITERABLE:
            return f"{self.compress('java.lang.Iterable')}<{element_args}>"
        if kind is TypeRefKind.ITERATOR:
            return f"{self.compress('java.util.Iterator')}<{element_args}>"
        if kind is TypeRefKind.MAP:
            return f"{self.compress('java.util.Map')}<{element_args}>"
        if kind is TypeRefKind.ENTRY:
            return f"{self.compress('java.util.Map')}.Entry<{element_args}>"
        if kind is TypeRefKind.OPTIONAL:
            return f"{self.compress(category.wrapper.qualified_name)}<{element_args}>"
        raise ValueError(f"Unsupported type reference: {kind}")

    def raw_type_ref(self, ref: TypeRef, names: Dict[TypeRefKind, str]) -> str:
        """Erased spelling of a reference, as used by ``instanceof``."""
        rendered = self.type_ref(ref, names)
        return rendered.split("<", 1)[0]

    def _wildcard_args(self, category: FieldCategory) -> str:
        if category.kind is CategoryKind.MAP:
            return self.extended((category.key, category.value))
        return self.extended((category.element,))

    def import_groups(self) -> List[List[str]]:
        groups: List[List[str]] = [[] for _ in range(len(IMPORT_GROUPS) + 1)]
        for name in sorted(self.imports):
            index = next(
                (i for i, prefix in enumerate(IMPORT_GROUPS) if name.startswith(prefix)),
                len(IMPORT_GROUPS),
            )
            groups[index].append(name)
        return [group for group in groups if group]

