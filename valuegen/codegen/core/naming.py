"""
Identifier handling shared by the planner and the emitters.

Covers keyword escaping, collision-free local names, snake-case module
names and the singular-name policy behind ``add<Singular>``/``put<Singular>``.
"""

import re
from typing import Dict, Iterable, Optional, Set

import inflect

from ...logging_config import get_logger

logger = get_logger(__name__)

INFLECT_ENGINE = inflect.engine()


# Identifiers a field-derived name may never take: the keywords and literals
# of the contract language.
RESERVED_IDENTIFIERS = frozenset({
    'abstract', 'assert', 'boolean', 'break', 'byte', 'case', 'catch',
    'char', 'class', 'const', 'continue', 'default', 'do', 'double', 'else',
    'enum', 'extends', 'false', 'final', 'finally', 'float', 'for', 'goto',
    'if', 'implements', 'import', 'instanceof', 'int', 'interface', 'long',
    'native', 'new', 'null', 'package', 'private', 'protected', 'public',
    'return', 'short', 'static', 'strictfp', 'super', 'switch',
    'synchronized', 'this', 'throw', 'throws', 'transient', 'true', 'try',
    'void', 'volatile', 'while',
})


class NameSanitizer:
    """Escapes names that collide with a target language's reserved words."""

    def __init__(self, reserved_words: Optional[Set[str]] = None):
        self.reserved_words = set(reserved_words or ())
        self._escaped: Dict[str, str] = {}

    def is_reserved(self, name: str) -> bool:
        return name in self.reserved_words

    def escape(self, name: str, suffix: str = "_") -> str:
        """Append ``suffix`` to a reserved word, return anything else as-is."""
        escaped = self._escaped.get(name)
        if escaped is None:
            escaped = f"{name}{suffix}" if self.is_reserved(name) else name
            self._escaped[name] = escaped
        return escaped


def to_snake_case(name: str) -> str:
    name = name.replace('-', '_')
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    return re.sub(r'_+', '_', name.lower()).strip('_')


def capitalize_first(name: str) -> str:
    """Upper-case the first character only: ``fooBar`` -> ``FooBar``."""
    if name is None:
        raise TypeError("name must not be None")
    return name[:1].upper() + name[1:]


def unique_variable(name: str, scope: Iterable[str]) -> str:
    """Prefix ``name`` with underscores until it does not clash with ``scope``."""
    taken = set(scope)
    while name in taken:
        name = f"_{name}"
    return name


def singular_name(name: str, is_builtin_type_name=None) -> Optional[str]:
    """
    Derive the singular form used for ``add<Singular>``/``put<Singular>``.

    Returns None, and no convenience mutator is generated, when the singular
    is unchanged, is a reserved identifier, or names a built-in type.

    Args:
        name: Plural field name
        is_builtin_type_name: Predicate over simple type names
    """
    if not name:
        return None
    singular = INFLECT_ENGINE.singular_noun(name)
    if not singular or singular == name:
        return None
    if singular in RESERVED_IDENTIFIERS:
        logger.debug(f"Skipping singular of {name}: '{singular}' is reserved")
        return None
    if is_builtin_type_name is not None and is_builtin_type_name(singular):
        logger.debug(f"Skipping singular of {name}: '{singular}' is a built-in type")
        return None
    return singular
