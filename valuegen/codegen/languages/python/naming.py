"""
Python-specific naming utilities and sanitization.

Handles Python reserved words and the names generated modules rely on.
"""

import keyword

from ...core.naming import NameSanitizer, to_snake_case


# Python reserved keywords
PYTHON_RESERVED_WORDS = set(keyword.kwlist)

# Names a parameter or local of a generated method must not shadow
GENERATED_CODE_NAMES = {
    "self",
    "cls",
    "args",
    "_rt",
    "abc",
    "object",
    "isinstance",
    "len",
    "list",
    "set",
    "dict",
    "frozenset",
    "iter",
    "type",
    "AttributeError",
    "NotImplementedError",
}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer for method names."""
    return NameSanitizer(PYTHON_RESERVED_WORDS)


def create_parameter_sanitizer() -> NameSanitizer:
    """Create a name sanitizer for parameters and locals."""
    return NameSanitizer(PYTHON_RESERVED_WORDS | GENERATED_CODE_NAMES)


def module_name(builder_name: str) -> str:
    """``FooBuilder`` -> ``foo_builder``."""
    return to_snake_case(builder_name)
