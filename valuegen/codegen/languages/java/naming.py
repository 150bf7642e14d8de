"""
Java-specific naming utilities.
"""

from ...core.naming import RESERVED_IDENTIFIERS, NameSanitizer

JAVA_RESERVED_WORDS = set(RESERVED_IDENTIFIERS)


def create_java_sanitizer() -> NameSanitizer:
    """Create a name sanitizer for Java parameters and locals."""
    return NameSanitizer(JAVA_RESERVED_WORDS)


def builder_file_name(builder_name: str) -> str:
    return f"{builder_name}.java"
