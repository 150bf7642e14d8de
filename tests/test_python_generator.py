import math

import pytest

from valuegen.runtime import NullArgument, Optional

from conftest import load_generated, member, plan_for, target


def build_module(python_generator, descriptor):
    return load_generated(python_generator.generate(plan_for(descriptor)))


class TestFooBuilder:
    def test_build_defaults(self, foo_module):
        foo = foo_module["FooBuilder"]().id("a").build()
        assert foo.id() == "a"
        assert foo.tags() == ()
        assert foo.nick() is None
        assert str(foo) == "Foo{id=a, tags=[], nick=null}"
        assert repr(foo) == str(foo)

    def test_value_implements_contract(self, foo_module):
        foo = foo_module["FooBuilder"]().id("a").build()
        assert isinstance(foo, foo_module["Foo"])

    def test_hash_matches_jvm_convention(self, foo_module):
        foo = foo_module["FooBuilder"]().id("a").addTag("x").build()
        assert hash(foo) == 127689

    def test_equality(self, foo_module):
        builder = foo_module["FooBuilder"]
        first = builder().id("a").tags(["x", "y"]).build()
        second = builder().id("a").addTag("x").addTag("y").build()
        assert first == second
        assert hash(first) == hash(second)
        assert first != builder().id("b").tags(["x", "y"]).build()
        assert first != "Foo"

    def test_missing_required_field(self, foo_module):
        with pytest.raises(NullArgument) as excinfo:
            foo_module["FooBuilder"]().build()
        assert excinfo.value.name == "id"

    def test_setter_rejects_none(self, foo_module):
        with pytest.raises(NullArgument):
            foo_module["FooBuilder"]().id(None)

    def test_null_item_rejected(self, foo_module):
        with pytest.raises(NullArgument) as excinfo:
            foo_module["FooBuilder"]().tags(["a", None])
        assert excinfo.value.name == "tags: null item"

    def test_nullable_field_accepts_none(self, foo_module):
        foo = foo_module["FooBuilder"]().id("a").nick("n").nick(None).build()
        assert foo.nick() is None

    def test_value_is_immutable(self, foo_module):
        foo = foo_module["FooBuilder"]().id("a").build()
        with pytest.raises(AttributeError):
            foo._id = "b"
        with pytest.raises(AttributeError):
            foo.extra = 1
        with pytest.raises(AttributeError):
            del foo._id

    def test_built_collection_is_detached(self, foo_module):
        builder = foo_module["FooBuilder"]().id("a").tags(["x"])
        foo = builder.build()
        builder.addTag("y")
        assert foo.tags() == ("x",)
        assert builder.tags() == ["x", "y"]

    @pytest.mark.parametrize(
        "args",
        [
            (["x", "y"],),
            (("x", "y"),),
            (iter(["x", "y"]),),
            ((t for t in ["x", "y"]),),
            ("x", "y"),
        ],
    )
    def test_collection_overloads(self, foo_module, args):
        foo = foo_module["FooBuilder"]().id("a").tags(*args).build()
        assert foo.tags() == ("x", "y")

    def test_single_string_is_varargs(self, foo_module):
        foo = foo_module["FooBuilder"]().id("a").tags("xy").build()
        assert foo.tags() == ("xy",)

    def test_no_overload(self, foo_module):
        with pytest.raises(TypeError, match="no overload"):
            foo_module["FooBuilder"]().id("a", "b")

    def test_copy_from_value_and_builder(self, foo_module):
        builder_cls = foo_module["FooBuilder"]
        source = builder_cls().id("a").tags(["x"])
        foo = source.build()

        from_value = builder_cls.from_(foo)
        assert isinstance(from_value, builder_cls)
        assert from_value.build() == foo

        from_builder = builder_cls.from_(source).addTag("y")
        assert source.tags() == ["x"]
        assert from_builder.build().tags() == ("x", "y")

    def test_value_to_builder(self, foo_module):
        foo = foo_module["FooBuilder"]().id("a").build()
        assert foo.builder().id("b").build().id() == "b"
        assert foo.id() == "a"


def test_set_field(python_generator):
    module = build_module(python_generator, target("Tagged", member("labels", "Set<String>")))
    tagged = module["TaggedBuilder"]().labels({"a"}).addLabel("b").addLabel("a").build()
    assert tagged.labels() == frozenset({"a", "b"})
    assert module["TaggedBuilder"]().build().labels() == frozenset()


def test_absent_enforced_containers_use_shared_empties(python_generator):
    code = python_generator.generate(
        plan_for(
            target(
                "Holder",
                member("tags", "List<String>"),
                member("labels", "Set<String>"),
                member("counts", "Map<String,Integer>"),
            )
        )
    )
    assert "else _rt.EMPTY_LIST" in code
    assert "else _rt.EMPTY_SET" in code
    assert "else _rt.EMPTY_MAP" in code
    holder = load_generated(code)["HolderBuilder"]().build()
    assert holder.tags() == ()
    assert holder.labels() == frozenset()
    assert dict(holder.counts()) == {}


def test_map_field(python_generator):
    module = build_module(
        python_generator, target("Counter", member("counts", "Map<String,Integer>"))
    )
    builder = module["CounterBuilder"]
    counter = builder().counts("a", 1, "b", 2).putCount("c", 3).build()
    assert dict(counter.counts()) == {"a": 1, "b": 2, "c": 3}
    assert str(counter) == "Counter{counts={a=1, b=2, c=3}}"

    with pytest.raises(TypeError):
        counter.counts()["d"] = 4
    with pytest.raises(NullArgument) as excinfo:
        builder().counts({"a": None})
    assert excinfo.value.name == "counts: null value"
    with pytest.raises(NullArgument) as excinfo:
        builder().counts("a", 1, None, 2)
    assert excinfo.value.name == "counts: k2"


def test_optional_field(python_generator):
    module = build_module(python_generator, target("Named", member("name", "Optional<String>")))
    builder = module["NamedBuilder"]
    assert builder().build().name() is Optional.empty()
    assert builder().name(Optional.of("x")).build().name() == Optional.of("x")
    assert str(builder().name(Optional.of("x")).build()) == "Named{name=Optional[x]}"
    assert builder().name("x").build().name() == Optional.of("x")
    assert builder().name("x").name(None).build().name() == Optional.empty()


def test_scalar_fields(python_generator):
    module = build_module(
        python_generator,
        target(
            "Point",
            member("x", "int"),
            member("ratio", "double"),
            member("flag", "boolean"),
            member("data", "byte[]", nullable=True),
        ),
    )
    builder = module["PointBuilder"]
    point = builder().x(3).build()
    assert point.x() == 3
    assert point.ratio() == 0.0
    assert point.flag() is False
    assert str(point) == "Point{x=3, ratio=0.0, flag=false, data=null}"

    assert builder().ratio(0.0).build() != builder().ratio(-0.0).build()
    assert builder().data(b"ab").build() == builder().data(b"ab").build()


@pytest.mark.parametrize(
    "name, type_",
    [
        ("xs", "int[]"),
        ("counts", "Map<String,Integer>"),
        ("labels", "Set<String>"),
        ("tags", "List<String>"),
    ],
)
def test_enforced_setter_rejects_none(python_generator, name, type_):
    module = build_module(python_generator, target("Holder", member(name, type_)))
    with pytest.raises(NullArgument) as excinfo:
        getattr(module["HolderBuilder"](), name)(None)
    assert excinfo.value.name == name


def test_numeric_fields_are_type_strict(python_generator):
    module = build_module(
        python_generator,
        target("Bar", member("ratio", "Number"), member("weights", "Map<String,Number>")),
    )
    builder = module["BarBuilder"]
    whole = builder().ratio(1).weights({"w": 2}).build()
    fractional = builder().ratio(1.0).weights({"w": 2.0}).build()
    assert whole == builder().ratio(1).weights({"w": 2}).build()
    assert whole != fractional
    assert len({whole, fractional}) == 2
    assert builder().ratio(True).build() != builder().ratio(1).build()


@pytest.mark.parametrize(
    "type_, value, expected",
    [
        ("float", 1.5, 31 + 0x3FC00000),
        ("float", -0.0, 31),
        ("float", math.nan, 31 + 0x7FC00000),
        ("long", 1 << 32, 32),
        ("long", -1, 31),
        ("double", 1.0, 31 + 0x3FF00000),
    ],
)
def test_scalar_field_hashes(python_generator, type_, value, expected):
    module = build_module(python_generator, target("Gauge", member("level", type_)))
    assert hash(module["GaugeBuilder"]().level(value).build()) == expected


def test_float_fields_compare_as_32_bit(python_generator):
    module = build_module(python_generator, target("Gauge", member("level", "float")))
    builder = module["GaugeBuilder"]
    nan = builder().level(math.nan).build()
    assert nan == builder().level(float("nan")).build()
    assert hash(nan) == hash(builder().level(float("nan")).build())
    assert builder().level(0.0).build() != builder().level(-0.0).build()

    near = builder().level(0.1).build()
    assert near == builder().level(0.1 + 1e-12).build()
    assert hash(near) == hash(builder().level(0.1 + 1e-12).build())


def test_module_file_name(python_generator, foo_descriptor):
    plan = plan_for(foo_descriptor)
    assert python_generator.file_name(plan) == "foo_builder.py"


def test_header_comment(foo_descriptor):
    from valuegen.codegen.languages.python import PythonGenerator

    plan = plan_for(foo_descriptor)
    with_header = PythonGenerator().generate(plan)
    without = PythonGenerator({"add_comments": False}).generate(plan)
    assert with_header.startswith("# Generated by valuegen from com.example.Foo. Do not edit.")
    assert not without.startswith("#")
    assert "import valuegen.runtime as _rt" in without


def test_indent_size(foo_descriptor):
    from valuegen.codegen.languages.python import PythonGenerator

    code = PythonGenerator({"indent_size": 2}).generate(plan_for(foo_descriptor))
    assert "\n  def __init__(self):\n" in code
    load_generated(code)


class TestValueProperties:
    def test_round_trip(self, foo_module):
        foo = foo_module["FooBuilder"]().id("a").tags(["x"]).nick("n").build()
        assert foo.builder().build() == foo
        assert hash(foo.builder().build()) == hash(foo)

    def test_hash_depends_on_field_order(self, python_generator):
        forward = build_module(
            python_generator, target("Pair", member("a", "String"), member("b", "String"))
        )
        backward = build_module(
            python_generator, target("Pair", member("b", "String"), member("a", "String"))
        )
        first = forward["PairBuilder"]().a("x").b("y").build()
        second = backward["PairBuilder"]().a("x").b("y").build()
        assert hash(first) != hash(second)

    def test_enforced_collection_scenario(self, python_generator):
        module = build_module(
            python_generator, target("Item", member("id", "int"), member("tags", "List<String>"))
        )
        item = module["ItemBuilder"]().id(5).build()
        assert item.id() == 5
        assert item.tags() == ()
        assert item.tags() == item.tags()

    def test_nullable_collection_stays_absent(self, python_generator):
        module = build_module(
            python_generator, target("Item", member("tags", "List<String>", nullable=True))
        )
        builder = module["ItemBuilder"]
        assert builder().build().tags() is None
        assert builder().tags(["a"]).tags(None).build().tags() is None
        assert builder().tags(None, None).build().tags() == (None, None)

        absent = builder().build()
        assert builder.from_(absent).build().tags() is None
        assert builder.from_(builder()).build().tags() is None
        assert absent.builder().build().tags() is None

    def test_fixed_arity_entries_match_put(self, python_generator):
        module = build_module(
            python_generator, target("Counter", member("counts", "Map<String,Integer>"))
        )
        builder = module["CounterBuilder"]
        fixed = builder().counts("a", 1, "b", 2, "c", 3).build()
        sequential = builder().putCount("a", 1).putCount("b", 2).putCount("c", 3).build()
        assert fixed == sequential
        assert dict(fixed.counts()) == {"a": 1, "b": 2, "c": 3}
