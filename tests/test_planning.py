from valuegen.codegen.core.descriptors import load_targets
from valuegen.codegen.core.diagnostics import DiagnosticCollector
from valuegen.codegen.core.engine import plan_batch
from valuegen.codegen.core.plan import (
    ConstructorKind,
    EqualityRule,
    ExprStmt,
    HashAccumulate,
    HashRule,
    If,
    Invoke,
    MethodRole,
    StringRule,
    ThrowNullArgument,
    TypeRefKind,
    TypeRole,
)
from valuegen.codegen.core.render import local_names, walk_statements
from valuegen.codegen.core.resolver import TypeResolver

from conftest import member, plan_for, target


def signatures(type_def):
    return [(m.name, m.overload) for m in type_def.methods]


def throws(method):
    return [s.message for s in walk_statements(method.body) if isinstance(s, ThrowNullArgument)]


class TestBuilderPlan:
    def test_collection_mutators(self, foo_descriptor):
        builder = plan_for(foo_descriptor).builder
        tags = [s for s in signatures(builder) if s[0] in ("tags", "addTag")]
        assert tags == [
            ("tags", "get"),
            ("tags", "same"),
            ("tags", "collection"),
            ("tags", "iterable"),
            ("tags", "iterator"),
            ("tags", "varargs"),
            ("addTag", "item"),
        ]

    def test_general_forms_delegate(self, foo_descriptor):
        builder = plan_for(foo_descriptor).builder
        same = builder.method("tags", "same")
        (ret,) = same.body
        assert isinstance(ret.value, Invoke)
        assert ret.value.overload == "collection"

    def test_null_item_messages(self, foo_descriptor):
        builder = plan_for(foo_descriptor).builder
        assert throws(builder.method("tags", "collection")) == ["tags", "tags: null item"]
        assert throws(builder.method("addTag", "item")) == ["tag"]
        assert throws(builder.method("id", "set")) == ["id"]
        assert throws(builder.method("nick", "set")) == []

    def test_map_mutators(self):
        plan = plan_for(target("Foo", member("counts", "Map<String,Integer>")))
        names = signatures(plan.builder)
        assert ("counts", "map") in names
        assert [o for n, o in names if o.startswith("entries")] == [
            f"entries{i}" for i in range(1, 6)
        ]
        assert ("putCount", "item") in names

        entries3 = plan.builder.method("counts", "entries3")
        assert [p.name for p in entries3.params] == ["k1", "v1", "k2", "v2", "k3", "v3"]
        first = entries3.body[0]
        assert isinstance(first, ExprStmt)
        assert first.expr.overload == "entries2"
        assert throws(entries3) == ["counts: k3", "counts: v3"]
        assert throws(plan.builder.method("putCount", "item")) == ["count: key", "count: value"]

    def test_optional_mutators(self):
        plan = plan_for(target("Foo", member("name", "Optional<String>")))
        raw = plan.builder.method("name", "raw")
        assert raw.role is MethodRole.OPTIONAL_RAW_SETTER
        assert raw.params[0].type.kind is TypeRefKind.ELEMENT
        default = plan.builder.constructor(ConstructorKind.DEFAULT)
        assert len(default.body) == 1

    def test_no_singular_mutator_without_plural_form(self):
        plan = plan_for(target("Foo", member("sheep", "List<String>")))
        assert not [n for n, _ in signatures(plan.builder) if n.startswith("add")]

    def test_factories_and_to_builder(self):
        plain = plan_for(target("Foo", member("id", "int")))
        assert ("from", "value") in signatures(plain.builder)
        assert ("from", "builder") in signatures(plain.builder)
        assert ("builder", "builder") not in signatures(plain.builder)

        with_builder = plan_for(
            target("Foo", member("id", "int"), member("builder", "FooBuilder"))
        )
        assert ("builder", "builder") in signatures(with_builder.builder)
        assert with_builder.metadata["supports_to_builder"]

    def test_builder_visibility(self):
        plan = plan_for(target("Foo", member("id", "int"), public=False))
        assert plan.builder.public is False
        assert plan.builder.role is TypeRole.BUILDER

    def test_loop_variables_avoid_field_names(self):
        plan = plan_for(target("Foo", member("item", "List<String>")))
        collection = plan.builder.method("item", "collection")
        assert "_item" in local_names(collection.body)


class TestValuePlan:
    def test_shape(self, foo_descriptor):
        value = plan_for(foo_descriptor).value
        assert value.role is TypeRole.VALUE
        assert value.enclosing == "FooBuilder"
        assert all(f.final for f in value.fields)
        assert signatures(value)[-4:] == [
            ("builder", "builder"),
            ("equals", "equals"),
            ("hashCode", "hashCode"),
            ("toString", "toString"),
        ]

    def test_constructor_checks_only_enforced_non_containers(self, foo_descriptor):
        ctor = plan_for(foo_descriptor).value.constructor(ConstructorKind.VALUE)
        checks = [s for s in ctor.body if isinstance(s, If)]
        assert throws(ctor) == ["id"]
        assert len(checks) == 1

    def test_rules(self):
        plan = plan_for(
            target(
                "Foo",
                member("flag", "boolean"),
                member("ratio", "float"),
                member("total", "double"),
                member("count", "long"),
                member("letter", "char"),
                member("raw", "byte[]"),
                member("name", "String"),
            )
        )
        equals = plan.value.method("equals", "equals")
        rules = [s.condition.rule for s in equals.body[3:-1]]
        assert rules == [
            EqualityRule.PRIMITIVE,
            EqualityRule.FLOAT_BITS,
            EqualityRule.DOUBLE_BITS,
            EqualityRule.PRIMITIVE,
            EqualityRule.PRIMITIVE,
            EqualityRule.ARRAY_DEEP,
            EqualityRule.NULL_SAFE,
        ]

        hash_code = plan.value.method("hashCode", "hashCode")
        terms = [s.term.rule for s in hash_code.body if isinstance(s, HashAccumulate)]
        assert terms == [
            HashRule.BOOLEAN,
            HashRule.FLOAT_BITS,
            HashRule.DOUBLE_FOLD,
            HashRule.LONG_FOLD,
            HashRule.WIDEN,
            HashRule.ARRAY_DEEP,
            HashRule.STRUCTURAL,
        ]

        to_string = plan.value.method("toString", "toString")
        parts = to_string.body[0].value.parts
        assert [p.rule for p in parts if p.name == "raw"] == [StringRule.ARRAY_ELEMENTS]

    def test_equals_locals_avoid_field_names(self):
        plan = plan_for(target("Foo", member("o", "int"), member("that", "int")))
        equals = plan.value.method("equals", "equals")
        assert equals.params[0].name == "_o"
        assert "_that" in local_names(equals.body)


class TestEngine:
    def _targets(self):
        return load_targets(
            [
                target("A", member("id", "int")),
                target("Bad", member("x", "Missing", resolved=False)),
                target("C", member("ref", "com.example.A")),
                target("D", member("tags", "List<String>")),
            ]
        )

    def test_results_keep_input_order(self):
        sink = DiagnosticCollector()
        plans = plan_batch(self._targets(), TypeResolver(known_types=[]), sink)
        assert [p.builder_name if p else None for p in plans] == [
            "ABuilder",
            None,
            "CBuilder",
            "DBuilder",
        ]
        assert [d.target for d in sink.errors] == ["com.example.Bad"]

    def test_parallel_matches_sequential(self):
        sequential = plan_batch(self._targets(), TypeResolver(), DiagnosticCollector())
        parallel = plan_batch(
            self._targets(), TypeResolver(), DiagnosticCollector(), max_workers=4
        )
        assert sequential == parallel

    def test_batch_leaves_resolver_untouched(self):
        resolver = TypeResolver(known_types=[])
        plan_batch(self._targets(), resolver, DiagnosticCollector())
        assert resolver.known_types == set()

        sink = DiagnosticCollector()
        (plan,) = plan_batch(
            load_targets([target("E", member("ref", "com.example.A"))]), resolver, sink
        )
        assert plan is None
        assert "Unresolved type com.example.A" in sink.errors[0].message
