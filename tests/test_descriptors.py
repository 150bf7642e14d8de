import pytest

from valuegen.codegen.core.descriptors import (
    DescriptorError,
    TypeDescriptor,
    TypeKind,
    load_targets,
    parse_type,
)

from conftest import member, target


class TestParseType:
    def test_primitive(self):
        assert parse_type("int") == TypeDescriptor.primitive("int")

    def test_implicit_import(self):
        assert parse_type("String").name == "java.lang.String"
        assert parse_type("List<String>").name == "java.util.List"

    def test_generic_arguments(self):
        parsed = parse_type("Map<String, java.lang.Integer>")
        assert parsed.name == "java.util.Map"
        assert [a.name for a in parsed.args] == ["java.lang.String", "java.lang.Integer"]

    def test_array_suffixes(self):
        parsed = parse_type("int[][]")
        assert parsed.kind is TypeKind.ARRAY
        assert parsed.component.kind is TypeKind.ARRAY
        assert parsed.component.component == TypeDescriptor.primitive("int")

    def test_wildcard_collapses_to_bound(self):
        parsed = parse_type("List<? extends Number>")
        assert parsed.args[0].name == "java.lang.Number"

    def test_unbounded_wildcard_is_object(self):
        assert parse_type("List<?>").args[0].name == "java.lang.Object"

    def test_canonical_string_form(self):
        assert str(parse_type("Map<String, List<Integer>>")) == (
            "java.util.Map<java.lang.String,java.util.List<java.lang.Integer>>"
        )

    @pytest.mark.parametrize("text", ["", "List<", "Map<String,>", "int]", "<String>"])
    def test_malformed(self, text):
        with pytest.raises(DescriptorError):
            parse_type(text)


class TestLoadTargets:
    def test_document_forms(self):
        single = target("Foo", member("id", "String"))
        assert len(load_targets(single)) == 1
        assert len(load_targets([single, single])) == 2
        assert len(load_targets({"targets": [single]})) == 1

    def test_target_fields(self):
        (loaded,) = load_targets(
            target("Outer.Foo", member("id", "String", nullable=True), public=False)
        )
        assert loaded.qualified_name == "com.example.Outer.Foo"
        assert loaded.simple_name == "Foo"
        assert loaded.is_public is False
        assert loaded.members[0].nullable

    def test_unresolved_member_becomes_error_type(self):
        (loaded,) = load_targets(target("Foo", member("x", "Missing", resolved=False)))
        assert loaded.members[0].type.kind is TypeKind.ERROR

    def test_member_without_type(self):
        with pytest.raises(DescriptorError):
            load_targets(target("Foo", {"name": "id"}))

    def test_target_without_name(self):
        with pytest.raises(DescriptorError):
            load_targets({"package": "x", "members": []})

    def test_non_list_document(self):
        with pytest.raises(DescriptorError):
            load_targets("not a target")

    def test_unparseable_member_type_becomes_error_type(self):
        (loaded,) = load_targets(target("Foo", member("m", "Map<String,"), member("id", "int")))
        assert loaded.members[0].type.kind is TypeKind.ERROR
        assert str(loaded.members[0].type) == "Map<String,"
        assert loaded.members[1].type == TypeDescriptor.primitive("int")
