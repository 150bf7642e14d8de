import pytest

from valuegen.codegen.core.classifier import classify
from valuegen.codegen.core.descriptors import TypeDescriptor, parse_type
from valuegen.codegen.core.diagnostics import UnresolvedType
from valuegen.codegen.core.nullness import enforce_non_null
from valuegen.codegen.core.resolver import TypeResolver
from valuegen.codegen.core.schema import (
    GUAVA_OPTIONAL,
    JAVA_OPTIONAL,
    CategoryKind,
    FieldCategory,
    FieldSchema,
    ScalarKind,
)


@pytest.mark.parametrize(
    "text, kind",
    [
        ("int", CategoryKind.SCALAR),
        ("String", CategoryKind.REFERENCE),
        ("Object[]", CategoryKind.ARRAY),
        ("List<String>", CategoryKind.COLLECTION),
        ("Set<Long>", CategoryKind.SET),
        ("Map<String,Integer>", CategoryKind.MAP),
        ("Optional<String>", CategoryKind.OPTIONAL),
        ("com.google.common.base.Optional<String>", CategoryKind.OPTIONAL),
        ("java.util.Collection<String>", CategoryKind.REFERENCE),
        ("List", CategoryKind.REFERENCE),
    ],
)
def test_classification(text, kind, resolver):
    assert classify(parse_type(text), resolver).kind is kind


def test_payloads(resolver):
    scalar = classify(parse_type("double"), resolver)
    assert scalar.scalar_kind is ScalarKind.DOUBLE

    mapping = classify(parse_type("Map<String,List<Integer>>"), resolver)
    assert mapping.key.name == "java.lang.String"
    assert mapping.value.name == "java.util.List"

    optional = classify(parse_type("Optional<String>"), resolver)
    assert optional.wrapper is JAVA_OPTIONAL
    assert optional.element.name == "java.lang.String"

    guava = classify(parse_type("com.google.common.base.Optional<String>"), resolver)
    assert guava.wrapper is GUAVA_OPTIONAL


def test_shape_aliases():
    resolver = TypeResolver(shape_aliases={"list": ["com.acme.ImmutableList"]})
    category = classify(parse_type("com.acme.ImmutableList<String>"), resolver)
    assert category.kind is CategoryKind.COLLECTION


def test_unresolved_argument_is_reported():
    resolver = TypeResolver(known_types=["com.example.Known"])
    with pytest.raises(UnresolvedType) as excinfo:
        classify(parse_type("List<com.example.Unknown>"), resolver)
    assert excinfo.value.type_name == "com.example.Unknown"


def test_known_types_resolve():
    resolver = TypeResolver(known_types=["com.example.Known"])
    category = classify(parse_type("List<com.example.Known>"), resolver)
    assert category.kind is CategoryKind.COLLECTION


def test_error_type_never_resolves(resolver):
    with pytest.raises(UnresolvedType):
        classify(TypeDescriptor.error("Missing"), resolver)


class TestNullness:
    def _field(self, text, nullable=False):
        return FieldSchema("f", classify(parse_type(text), TypeResolver()), nullable)

    def test_scalars_never_enforce(self):
        assert not enforce_non_null(self._field("int"))

    def test_references_enforce_unless_nullable(self):
        assert enforce_non_null(self._field("String"))
        assert not enforce_non_null(self._field("String", nullable=True))

    def test_containers_enforce(self):
        for text in ("List<String>", "Set<String>", "Map<String,String>", "Optional<String>"):
            assert enforce_non_null(self._field(text))


def test_category_string_forms():
    category = FieldCategory.map(parse_type("Map<String,Integer>"))
    assert str(category) == "Map(java.lang.String, java.lang.Integer)"
    assert category.is_container
    assert not category.is_scalar
