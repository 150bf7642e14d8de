"""
Descriptor validation.

Turns a :class:`TargetDescriptor` into a :class:`TypeSchema`, reporting
every problem to the diagnostics sink. A target with errors produces no
schema; siblings are unaffected.
"""

from typing import List, Optional

from ...logging_config import get_logger
from .classifier import classify
from .descriptors import TargetDescriptor
from .diagnostics import (
    BuilderReturnTypeMismatch,
    DiagnosticsSink,
    GeneratorError,
    InvalidTargetShape,
    Severity,
    UnresolvedType,
)
from .naming import RESERVED_IDENTIFIERS
from .resolver import TypeResolver
from .schema import FieldSchema, TypeSchema, Visibility, builder_name_for

logger = get_logger(__name__)

BUILDER_ACCESSOR = "builder"


def _check_shape(target: TargetDescriptor):
    if target.kind != "interface":
        raise InvalidTargetShape(
            f"Target must be an interface, got {target.kind}", target.ref
        )


def _check_field_name(target: TargetDescriptor, name):
    if not isinstance(name, str) or not name.isidentifier():
        raise InvalidTargetShape(f"Field name '{name}' is not a valid identifier", target.ref)
    if name in RESERVED_IDENTIFIERS:
        raise InvalidTargetShape(f"Field name '{name}' is a reserved word", target.ref)


def _is_builder_accessor(member) -> bool:
    return member.name == BUILDER_ACCESSOR and not member.parameters


def _check_builder_accessor(target: TargetDescriptor, member):
    simple = builder_name_for(target.simple_name)
    qualified = f"{target.package}.{simple}" if target.package else simple
    declared = str(member.type)
    if declared not in (simple, qualified):
        raise BuilderReturnTypeMismatch(
            f"builder() return type must be {simple}", target.ref
        )


def validate_target(
    target: TargetDescriptor, resolver: TypeResolver, sink: DiagnosticsSink
) -> Optional[TypeSchema]:
    """
    Validate a target and build its schema.

    Args:
        target: Candidate target
        resolver: Type-resolution oracle
        sink: Receives diagnostics tagged with ``target.ref``

    Returns:
        The schema, or None when the target has errors
    """
    try:
        return _validate(target, resolver, sink)
    except GeneratorError as e:
        sink.report(Severity.ERROR, e.message, target.ref)
        return None


def _validate(
    target: TargetDescriptor, resolver: TypeResolver, sink: DiagnosticsSink
) -> Optional[TypeSchema]:
    _check_shape(target)

    fields: List[FieldSchema] = []
    seen = set()
    failed = False
    supports_to_builder = False

    for member in target.members:
        if member.is_static:
            continue

        if _is_builder_accessor(member):
            _check_builder_accessor(target, member)
            supports_to_builder = True
            continue

        if member.parameters:
            raise InvalidTargetShape(
                f"Field accessor {member.name}() must not take parameters", target.ref
            )
        _check_field_name(target, member.name)
        if member.name in seen:
            raise InvalidTargetShape(f"Duplicate field '{member.name}'", target.ref)
        seen.add(member.name)

        try:
            category = classify(member.type, resolver)
        except UnresolvedType as e:
            sink.report(
                Severity.ERROR,
                f"Unresolved type {e.type_name} for field '{member.name}'",
                target.ref,
            )
            failed = True
            continue

        if not resolver.is_accessible(member.type):
            sink.report(
                Severity.WARNING,
                f"Type {member.type} of field '{member.name}' may not be accessible",
                target.ref,
            )

        fields.append(FieldSchema(member.name, category, nullable=member.nullable))

    if failed:
        logger.info(f"Dropping {target.ref}: unresolved field types")
        return None

    schema = TypeSchema(
        package=target.package,
        target_name=target.name,
        fields=tuple(fields),
        visibility=Visibility.PUBLIC if target.is_public else Visibility.PACKAGE_PRIVATE,
        supports_to_builder=supports_to_builder,
    )
    logger.info(f"Validated {target.ref} with {len(fields)} field(s)")
    return schema
