"""
Target descriptors: the plain-data input of the generator.

A target is an interface-shaped contract whose zero-argument members are
field accessors. Type references are kept in their canonical textual form
(``java.util.Map<java.lang.String,java.lang.Integer>``) and parsed into
:class:`TypeDescriptor` trees.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ...logging_config import get_logger

logger = get_logger(__name__)


class DescriptorError(Exception):
    """Raised for malformed descriptor input."""

    pass


class TypeKind(Enum):
    """Structural kinds of a type reference."""

    PRIMITIVE = "primitive"
    DECLARED = "declared"
    ARRAY = "array"
    ERROR = "error"


PRIMITIVE_TYPES = frozenset(
    {"boolean", "byte", "short", "int", "long", "char", "float", "double"}
)

# Unqualified names that resolve without an explicit package.
IMPLICIT_IMPORTS = {
    "Object": "java.lang.Object",
    "String": "java.lang.String",
    "CharSequence": "java.lang.CharSequence",
    "Number": "java.lang.Number",
    "Boolean": "java.lang.Boolean",
    "Byte": "java.lang.Byte",
    "Short": "java.lang.Short",
    "Integer": "java.lang.Integer",
    "Long": "java.lang.Long",
    "Character": "java.lang.Character",
    "Float": "java.lang.Float",
    "Double": "java.lang.Double",
    "Iterable": "java.lang.Iterable",
    "List": "java.util.List",
    "Set": "java.util.Set",
    "Map": "java.util.Map",
    "Collection": "java.util.Collection",
    "Iterator": "java.util.Iterator",
    "Optional": "java.util.Optional",
}


@dataclass(frozen=True)
class TypeDescriptor:
    """A resolved (or unresolvable) type reference."""

    name: str
    kind: TypeKind = TypeKind.DECLARED
    args: Tuple["TypeDescriptor", ...] = ()
    component: Optional["TypeDescriptor"] = None

    @classmethod
    def primitive(cls, name: str) -> "TypeDescriptor":
        return cls(name, TypeKind.PRIMITIVE)

    @classmethod
    def declared(cls, name: str, *args: "TypeDescriptor") -> "TypeDescriptor":
        return cls(name, TypeKind.DECLARED, tuple(args))

    @classmethod
    def array_of(cls, component: "TypeDescriptor") -> "TypeDescriptor":
        return cls(f"{component}[]", TypeKind.ARRAY, component=component)

    @classmethod
    def error(cls, name: str) -> "TypeDescriptor":
        return cls(name, TypeKind.ERROR)

    @property
    def simple_name(self) -> str:
        if self.kind is TypeKind.ARRAY:
            return f"{self.component.simple_name}[]"
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_parameterized(self) -> bool:
        return bool(self.args)

    def __str__(self) -> str:
        if self.kind is TypeKind.ARRAY:
            return f"{self.component}[]"
        if self.args:
            return f"{self.name}<{','.join(str(a) for a in self.args)}>"
        return self.name


_TOKEN = re.compile(r"\s*(\?|[A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*|<|>|,|\[\s*\])")


def _tokenize(text: str) -> List[str]:
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if not match:
            raise DescriptorError(f"Cannot parse type '{text}' at offset {pos}")
        tokens.append(re.sub(r"\s+", "", match.group(1)))
        pos = match.end()
    return tokens


class _TypeParser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self, expected: Optional[str] = None) -> str:
        token = self.peek()
        if token is None or (expected is not None and token != expected):
            raise DescriptorError(
                f"Malformed type '{self.text}': expected {expected or 'a name'}, "
                f"got {token or 'end of input'}"
            )
        self.pos += 1
        return token

    def parse(self) -> TypeDescriptor:
        result = self.parse_type()
        if self.peek() is not None:
            raise DescriptorError(f"Trailing input in type '{self.text}'")
        return result

    def parse_type(self) -> TypeDescriptor:
        token = self.take()
        if token == "?":
            # Wildcards collapse to their bound.
            if self.peek() in ("extends", "super"):
                self.take()
                result = self.parse_type()
            else:
                result = TypeDescriptor.declared("java.lang.Object")
        elif token in PRIMITIVE_TYPES:
            result = TypeDescriptor.primitive(token)
        elif token in ("<", ">", ",", "[]"):
            raise DescriptorError(f"Malformed type '{self.text}'")
        else:
            name = IMPLICIT_IMPORTS.get(token, token)
            args = []
            if self.peek() == "<":
                self.take("<")
                args.append(self.parse_type())
                while self.peek() == ",":
                    self.take(",")
                    args.append(self.parse_type())
                self.take(">")
            result = TypeDescriptor.declared(name, *args)
        while self.peek() == "[]":
            self.take()
            result = TypeDescriptor.array_of(result)
        return result


def parse_type(text: str) -> TypeDescriptor:
    """
    Parse a textual type reference.

    Accepts primitives, qualified or implicitly imported names, generic
    arguments, wildcards and array suffixes, e.g. ``Map<String, int[]>``.

    Raises:
        DescriptorError: If the text is not a well-formed type.
    """
    if not isinstance(text, str) or not text.strip():
        raise DescriptorError(f"Type must be a non-empty string, got {text!r}")
    return _TypeParser(text).parse()


@dataclass(frozen=True)
class MemberDescriptor:
    """A member of a target contract."""

    name: str
    type: TypeDescriptor
    is_static: bool = False
    annotations: Tuple[str, ...] = ()
    parameters: Tuple[TypeDescriptor, ...] = ()

    @property
    def nullable(self) -> bool:
        """True when the member carries an annotation named ``Nullable``."""
        return any(a.rsplit(".", 1)[-1] == "Nullable" for a in self.annotations)


@dataclass(frozen=True)
class TargetDescriptor:
    """A candidate target for generation."""

    package: str
    name: str
    kind: str = "interface"
    is_public: bool = True
    members: Tuple[MemberDescriptor, ...] = field(default_factory=tuple)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name

    @property
    def ref(self) -> str:
        """Reference used when attaching diagnostics."""
        return self.qualified_name


def _parse_member_type(text: Any, member: str) -> TypeDescriptor:
    """Parse a member type, keeping unparseable text as an error type."""
    try:
        return parse_type(text)
    except DescriptorError as e:
        logger.warning(f"Member {member}: {e}")
        return TypeDescriptor.error(str(text))


def _member_from_dict(data: Dict[str, Any]) -> MemberDescriptor:
    try:
        name = data["name"]
        type_text = data["type"]
    except (KeyError, TypeError) as e:
        raise DescriptorError(f"Member needs 'name' and 'type': {data!r}") from e

    type_ = _parse_member_type(type_text, name)
    if data.get("resolved", True) is False:
        type_ = TypeDescriptor.error(str(type_))

    parameters = tuple(_parse_member_type(p, name) for p in data.get("parameters", ()))
    return MemberDescriptor(
        name=name,
        type=type_,
        is_static=bool(data.get("static", False)),
        annotations=tuple(data.get("annotations", ())),
        parameters=parameters,
    )


def target_from_dict(data: Dict[str, Any]) -> TargetDescriptor:
    """Build a :class:`TargetDescriptor` from its JSON object form."""
    if not isinstance(data, dict):
        raise DescriptorError(f"Target must be a JSON object, got {type(data).__name__}")

    name = data.get("name")
    if not name:
        raise DescriptorError("Target is missing 'name'")

    package = data.get("package", "")

    members = data.get("members", data.get("fields", []))
    if not isinstance(members, list):
        raise DescriptorError(f"Members of {name} must be a list")

    return TargetDescriptor(
        package=package,
        name=name,
        kind=data.get("kind", "interface"),
        is_public=bool(data.get("public", True)),
        members=tuple(_member_from_dict(m) for m in members),
    )


def load_targets(data: Any) -> List[TargetDescriptor]:
    """
    Load target descriptors from parsed JSON.

    Args:
        data: Either ``{"targets": [...]}``, a list of targets or a single
            target object

    Returns:
        List of target descriptors in input order
    """
    if isinstance(data, dict) and "targets" in data:
        data = data["targets"]
    elif isinstance(data, dict):
        data = [data]

    if not isinstance(data, list):
        raise DescriptorError("Descriptor document must be a list of targets")

    targets = [target_from_dict(item) for item in data]
    logger.debug(f"Loaded {len(targets)} target descriptor(s)")
    return targets
