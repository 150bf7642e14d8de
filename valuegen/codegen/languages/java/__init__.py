"""
Java code generator for builder and value classes.
"""

from .generator import JavaGenerator, create_java_generator
from .naming import JAVA_RESERVED_WORDS, create_java_sanitizer
from .renderer import JavaRenderer
from .types import JavaTypeMapper

__all__ = [
    "JavaGenerator",
    "create_java_generator",
    "JavaRenderer",
    "JavaTypeMapper",
    "JAVA_RESERVED_WORDS",
    "create_java_sanitizer",
]
