"""
Shared plan walker for language emitters.

Expressions render to strings and statements to lists of lines. Both are
dispatched on the node's class name: ``IsNull`` goes to ``expr_is_null``,
``ForEach`` to ``stmt_for_each``. A language renderer implements one method
per node class it can meet.
"""

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Union

from .config import GeneratorConfig
from .diagnostics import GeneratorError
from .naming import to_snake_case
from .plan import (
    ConstructorSpec,
    DeclareLocal,
    ForEach,
    ForEachEntry,
    GenerationPlan,
    If,
    InitHash,
    MethodSpec,
    TypeDefinition,
    WhileIterator,
)
from .schema import FieldCategory

Member = Union[MethodSpec, ConstructorSpec]


def walk_statements(body) -> Iterator:
    """Yield every statement of ``body``, nested ones included."""
    for stmt in body:
        yield stmt
        nested = getattr(stmt, "body", None)
        if nested:
            yield from walk_statements(nested)


def local_names(body) -> Set[str]:
    """Names bound by declarations and loops inside ``body``."""
    names = set()
    for stmt in walk_statements(body):
        if isinstance(stmt, (DeclareLocal, InitHash)):
            names.add(stmt.name)
        elif isinstance(stmt, (ForEach, WhileIterator)):
            names.add(stmt.item)
        elif isinstance(stmt, ForEachEntry):
            names.add(stmt.entry)
    return names


class PlanRenderer:
    """Base class for rendering plan nodes as source text."""

    def __init__(self, plan: GenerationPlan, config: GeneratorConfig):
        self.plan = plan
        self.config = config
        self.indent = config.indent
        self.type_def: Optional[TypeDefinition] = None
        self.member: Optional[Member] = None
        self.scope: Set[str] = set()
        self._handlers: Dict[str, Callable] = {}

    def _handler(self, prefix: str, node) -> Callable:
        node_name = type(node).__name__
        key = f"{prefix}:{node_name}"
        handler = self._handlers.get(key)
        if handler is None:
            handler = getattr(self, f"{prefix}_{to_snake_case(node_name)}", None)
            if handler is None:
                raise GeneratorError(
                    f"{type(self).__name__} cannot render {node_name}",
                    self.plan.qualified_target_name,
                )
            self._handlers[key] = handler
        return handler

    def expr(self, node) -> str:
        return self._handler("expr", node)(node)

    def stmt(self, node) -> List[str]:
        return self._handler("stmt", node)(node)

    def block(self, body: Iterable) -> List[str]:
        lines: List[str] = []
        for node in body:
            lines.extend(self.stmt(node))
        return lines

    def indented(self, lines: Iterable[str], depth: int = 1) -> List[str]:
        prefix = self.indent * depth
        return [prefix + line if line else line for line in lines]

    def enter(self, type_def: TypeDefinition, member: Optional[Member] = None):
        """Make ``member`` of ``type_def`` the body rendered next."""
        self.type_def = type_def
        self.member = member
        self.scope = set()
        if member is not None:
            self.scope = {p.name for p in member.params} | local_names(member.body)

    def field_category(self, name: str) -> FieldCategory:
        for decl in self.type_def.fields:
            if decl.name == name:
                return decl.category
        raise GeneratorError(
            f"{self.type_def.name} has no field '{name}'", self.plan.qualified_target_name
        )

    def overloaded(self, name: str) -> bool:
        """Does the current type declare more than one method called ``name``?"""
        return len(self.type_def.methods_named(name)) > 1

    def method_groups(self, type_def: TypeDefinition) -> Dict[str, List[MethodSpec]]:
        """Methods by name, in order of first declaration."""
        groups: Dict[str, List[MethodSpec]] = {}
        for method in type_def.methods:
            groups.setdefault(method.name, []).append(method)
        return groups
