"""
Python code generator module.

Generates importable Python modules holding an immutable value type and
its builder.
"""

from .generator import PythonGenerator, create_python_generator
from .naming import create_parameter_sanitizer, create_python_sanitizer, module_name
from .renderer import PythonRenderer

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    "PythonRenderer",
    # Naming
    "create_python_sanitizer",
    "create_parameter_sanitizer",
    "module_name",
]
