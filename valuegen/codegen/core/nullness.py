"""Null-enforcement policy."""

from .schema import FieldSchema


def enforce_non_null(field: FieldSchema) -> bool:
    """
    Decide whether absence is rejected for ``field``.

    Scalars have no absent state; fields marked nullable opt out. Every other
    category enforces.
    """
    if field.category.is_scalar:
        return False
    return not field.nullable
