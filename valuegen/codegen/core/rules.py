"""
Equality, hash and string rules.

Each field maps to one rule per concern through enum-keyed tables that cover
every category and scalar kind.
"""

from typing import Dict, Sequence

from .naming import unique_variable
from .plan import (
    BOOLEAN,
    INT,
    OBJECT,
    STRING,
    TARGET,
    Cast,
    DeclareLocal,
    EqualityRule,
    FieldsDiffer,
    HashAccumulate,
    HashRule,
    HashTerm,
    Identical,
    If,
    InitHash,
    IsInstance,
    Literal,
    MethodRole,
    MethodSpec,
    Not,
    Param,
    Return,
    StringPart,
    StringRule,
    StringTemplate,
    This,
    Var,
)
from .schema import CategoryKind, FieldSchema, ScalarKind

SCALAR_EQUALITY: Dict[ScalarKind, EqualityRule] = {
    ScalarKind.BOOLEAN: EqualityRule.PRIMITIVE,
    ScalarKind.BYTE: EqualityRule.PRIMITIVE,
    ScalarKind.SHORT: EqualityRule.PRIMITIVE,
    ScalarKind.INT: EqualityRule.PRIMITIVE,
    ScalarKind.LONG: EqualityRule.PRIMITIVE,
    ScalarKind.CHAR: EqualityRule.PRIMITIVE,
    ScalarKind.FLOAT: EqualityRule.FLOAT_BITS,
    ScalarKind.DOUBLE: EqualityRule.DOUBLE_BITS,
}

CATEGORY_EQUALITY: Dict[CategoryKind, EqualityRule] = {
    CategoryKind.REFERENCE: EqualityRule.NULL_SAFE,
    CategoryKind.ARRAY: EqualityRule.ARRAY_DEEP,
    CategoryKind.COLLECTION: EqualityRule.NULL_SAFE,
    CategoryKind.SET: EqualityRule.NULL_SAFE,
    CategoryKind.MAP: EqualityRule.NULL_SAFE,
    CategoryKind.OPTIONAL: EqualityRule.NULL_SAFE,
}

SCALAR_HASH: Dict[ScalarKind, HashRule] = {
    ScalarKind.BOOLEAN: HashRule.BOOLEAN,
    ScalarKind.BYTE: HashRule.WIDEN,
    ScalarKind.SHORT: HashRule.WIDEN,
    ScalarKind.INT: HashRule.INT,
    ScalarKind.LONG: HashRule.LONG_FOLD,
    ScalarKind.CHAR: HashRule.WIDEN,
    ScalarKind.FLOAT: HashRule.FLOAT_BITS,
    ScalarKind.DOUBLE: HashRule.DOUBLE_FOLD,
}

CATEGORY_HASH: Dict[CategoryKind, HashRule] = {
    CategoryKind.REFERENCE: HashRule.STRUCTURAL,
    CategoryKind.ARRAY: HashRule.ARRAY_DEEP,
    CategoryKind.COLLECTION: HashRule.STRUCTURAL,
    CategoryKind.SET: HashRule.STRUCTURAL,
    CategoryKind.MAP: HashRule.STRUCTURAL,
    CategoryKind.OPTIONAL: HashRule.STRUCTURAL,
}

CATEGORY_STRING: Dict[CategoryKind, StringRule] = {
    kind: StringRule.DEFAULT for kind in CategoryKind
}
CATEGORY_STRING[CategoryKind.ARRAY] = StringRule.ARRAY_ELEMENTS

assert set(SCALAR_EQUALITY) == set(ScalarKind) == set(SCALAR_HASH)
assert set(CATEGORY_EQUALITY) | {CategoryKind.SCALAR} == set(CategoryKind)
assert set(CATEGORY_HASH) | {CategoryKind.SCALAR} == set(CategoryKind)


def equality_rule(field: FieldSchema) -> EqualityRule:
    category = field.category
    if category.is_scalar:
        return SCALAR_EQUALITY[category.scalar_kind]
    return CATEGORY_EQUALITY[category.kind]


def hash_rule(field: FieldSchema) -> HashRule:
    category = field.category
    if category.is_scalar:
        return SCALAR_HASH[category.scalar_kind]
    return CATEGORY_HASH[category.kind]


def string_rule(field: FieldSchema) -> StringRule:
    return CATEGORY_STRING[field.category.kind]


def equals_method(fields: Sequence[FieldSchema]) -> MethodSpec:
    """Identity shortcut, contract type check, then field-by-field with early exit."""
    names = [f.name for f in fields]
    other = unique_variable("o", names)
    that = unique_variable("that", names + [other])

    body = [
        If(Identical(This(), Var(other)), (Return(Literal(True)),)),
        If(Not(IsInstance(TARGET, Var(other))), (Return(Literal(False)),)),
        DeclareLocal(that, TARGET, Cast(TARGET, Var(other))),
    ]
    for field in fields:
        body.append(
            If(
                FieldsDiffer(equality_rule(field), field.name, Var(that)),
                (Return(Literal(False)),),
            )
        )
    body.append(Return(Literal(True)))

    return MethodSpec(
        name="equals",
        overload="equals",
        role=MethodRole.EQUALS,
        params=(Param(other, OBJECT),),
        returns=BOOLEAN,
        body=tuple(body),
        overrides=True,
    )


def hash_code_method(fields: Sequence[FieldSchema]) -> MethodSpec:
    """``result = 1``, then ``result = 31 * result + h(field)`` in field order."""
    accumulator = unique_variable("result", [f.name for f in fields])
    body = [InitHash(accumulator)]
    for field in fields:
        body.append(HashAccumulate(HashTerm(hash_rule(field), field.name), accumulator))
    body.append(Return(Var(accumulator)))

    return MethodSpec(
        name="hashCode",
        overload="hashCode",
        role=MethodRole.HASH_CODE,
        params=(),
        returns=INT,
        body=tuple(body),
        overrides=True,
    )


def to_string_method(fields: Sequence[FieldSchema], type_name: str) -> MethodSpec:
    parts = tuple(StringPart(f.name, string_rule(f)) for f in fields)
    return MethodSpec(
        name="toString",
        overload="toString",
        role=MethodRole.TO_STRING,
        params=(),
        returns=STRING,
        body=(Return(StringTemplate(type_name, parts)),),
        overrides=True,
    )
