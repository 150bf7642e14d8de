"""
Field classification.

Maps a resolved type descriptor to exactly one :class:`FieldCategory`.
"""

from typing import Callable, List, Optional, Tuple

from ...logging_config import get_logger
from .descriptors import TypeDescriptor
from .diagnostics import UnresolvedType
from .resolver import Shape, TypeResolver
from .schema import FieldCategory

logger = get_logger(__name__)


def _optional(type_: TypeDescriptor, resolver: TypeResolver) -> Optional[FieldCategory]:
    if len(type_.args) == 1 and resolver.matches_shape(type_, Shape.OPTIONAL):
        return FieldCategory.optional(type_, resolver.optional_wrapper(type_))
    return None


def _collection(type_: TypeDescriptor, resolver: TypeResolver) -> Optional[FieldCategory]:
    if len(type_.args) == 1 and resolver.matches_shape(type_, Shape.LIST):
        return FieldCategory.collection(type_)
    return None


def _set(type_: TypeDescriptor, resolver: TypeResolver) -> Optional[FieldCategory]:
    if len(type_.args) == 1 and resolver.matches_shape(type_, Shape.SET):
        return FieldCategory.set(type_)
    return None


def _map(type_: TypeDescriptor, resolver: TypeResolver) -> Optional[FieldCategory]:
    if len(type_.args) == 2 and resolver.matches_shape(type_, Shape.MAP):
        return FieldCategory.map(type_)
    return None


def _array(type_: TypeDescriptor, resolver: TypeResolver) -> Optional[FieldCategory]:
    if resolver.matches_shape(type_, Shape.ARRAY):
        return FieldCategory.array(type_)
    return None


def _scalar(type_: TypeDescriptor, resolver: TypeResolver) -> Optional[FieldCategory]:
    if resolver.matches_shape(type_, Shape.PRIMITIVE):
        return FieldCategory.scalar(type_)
    return None


# First match wins.
CLASSIFICATION_ORDER: List[
    Tuple[str, Callable[[TypeDescriptor, TypeResolver], Optional[FieldCategory]]]
] = [
    ("optional", _optional),
    ("collection", _collection),
    ("set", _set),
    ("map", _map),
    ("array", _array),
    ("scalar", _scalar),
]


def classify(type_: TypeDescriptor, resolver: TypeResolver) -> FieldCategory:
    """
    Classify a field type.

    Args:
        type_: Declared type of the field
        resolver: Type-resolution oracle

    Returns:
        The field's category

    Raises:
        UnresolvedType: If the type, or one of its arguments, does not resolve
    """
    culprit = resolver.first_unresolved(type_)
    if culprit is not None:
        raise UnresolvedType(str(culprit))

    for label, matcher in CLASSIFICATION_ORDER:
        category = matcher(type_, resolver)
        if category is not None:
            logger.debug(f"Classified {type_} as {label}")
            return category

    return FieldCategory.reference(type_)
