"""
Value-type planning.

The value type is immutable: final storage per field, one positional
constructor in schema order, getters, equals/hashCode/toString and a
``builder()`` method returning a builder seeded with its fields.
"""

from typing import List

from ...logging_config import get_logger
from .nullness import enforce_non_null
from .plan import (
    BUILDER,
    TARGET,
    Assign,
    Construct,
    ConstructorKind,
    ConstructorSpec,
    EmptyContainer,
    FieldDecl,
    IsNull,
    MethodRole,
    MethodSpec,
    Param,
    Return,
    SelfField,
    Ternary,
    This,
    TypeDefinition,
    TypeRefKind,
    TypeRole,
    Var,
    null_check,
    ref,
)
from .rules import equals_method, hash_code_method, to_string_method
from .schema import FieldSchema, TypeSchema

logger = get_logger(__name__)


def _value_constructor(fields: List[FieldSchema]) -> ConstructorSpec:
    params = tuple(Param(f.name, ref(TypeRefKind.FIELD, f.category)) for f in fields)

    body = []
    for field in fields:
        if enforce_non_null(field) and not field.category.is_container:
            body.append(null_check(Var(field.name), field.name))

    for field in fields:
        value = Var(field.name)
        if enforce_non_null(field) and field.category.is_container:
            value = Ternary(
                IsNull(Var(field.name), negate=True),
                Var(field.name),
                EmptyContainer(field.category),
            )
        body.append(Assign(SelfField(field.name), value))

    return ConstructorSpec(ConstructorKind.VALUE, params, tuple(body))


def _getter(field: FieldSchema) -> MethodSpec:
    return MethodSpec(
        name=field.name,
        overload="get",
        role=MethodRole.GETTER,
        params=(),
        returns=ref(TypeRefKind.FIELD, field.category),
        body=(Return(SelfField(field.name)),),
        overrides=True,
        field=field.name,
    )


def _to_builder(schema: TypeSchema) -> MethodSpec:
    return MethodSpec(
        name="builder",
        overload="builder",
        role=MethodRole.TO_BUILDER,
        params=(),
        returns=BUILDER,
        body=(Return(Construct(BUILDER, ConstructorKind.COPY_VALUE, (This(),))),),
        overrides=schema.supports_to_builder,
    )


def build_value_type(schema: TypeSchema) -> TypeDefinition:
    """Plan the immutable value type for ``schema``."""
    fields = list(schema.fields)

    methods = [_getter(field) for field in fields]
    methods.append(_to_builder(schema))
    methods.append(equals_method(fields))
    methods.append(hash_code_method(fields))
    methods.append(to_string_method(fields, schema.target_name))

    logger.debug(f"Planned value type for {schema.qualified_name} with {len(methods)} method(s)")
    return TypeDefinition(
        name=schema.generated_value_name,
        role=TypeRole.VALUE,
        fields=tuple(FieldDecl(f.name, f.category, final=True) for f in fields),
        constructors=(_value_constructor(fields),),
        methods=tuple(methods),
        implements=TARGET,
        enclosing=schema.generated_builder_name,
        public=False,
    )
