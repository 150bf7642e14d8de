"""valuegen: immutable value types and fluent builders from target descriptors."""

__version__ = "0.1.0"
