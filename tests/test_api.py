import json

import pytest

from valuegen.codegen import generate_from_descriptors, quick_generate

from conftest import member, target


def descriptors():
    return {
        "targets": [
            target("Foo", member("id", "String")),
            target("Bad", member("x", "Missing", resolved=False)),
            target("Bar", member("foo", "com.example.Foo")),
        ]
    }


def test_batch_keeps_going_past_failures():
    batch = generate_from_descriptors(descriptors(), "java")
    assert not batch.success
    assert batch.failed_targets == ["com.example.Bad"]
    assert [t.name for t, _ in batch.generated] == ["Foo", "Bar"]
    assert batch.results[1] is None
    assert [d.target for d in batch.diagnostics.errors] == ["com.example.Bad"]

    _, bar = batch.generated[1]
    assert bar.metadata["relative_path"] == "com/example/BarBuilder.java"
    assert bar.metadata["field_count"] == 1
    assert "private Foo foo;" in bar.code
    assert bar.code.endswith("}\n")


def test_unparseable_type_only_fails_its_target():
    data = {
        "targets": [
            target("Good", member("id", "String")),
            target("Bad", member("m", "Map<String,")),
        ]
    }
    batch = generate_from_descriptors(data, "java")
    assert batch.failed_targets == ["com.example.Bad"]
    assert [t.name for t, _ in batch.generated] == ["Good"]
    (error,) = batch.diagnostics.errors
    assert error.target == "com.example.Bad"
    assert "Unresolved type Map<String, for field 'm'" in error.message


def test_parallel_batch_matches_sequential():
    data = descriptors()
    sequential = generate_from_descriptors(data, "python")
    parallel = generate_from_descriptors(data, "python", {"max_workers": 3})
    assert [r and r.code for r in sequential.results] == [r and r.code for r in parallel.results]


def test_quick_generate():
    files = quick_generate(json.dumps(target("Foo", member("id", "String"))), "py")
    assert list(files) == ["foo_builder.py"]
    assert "class FooBuilder:" in files["foo_builder.py"]


def test_quick_generate_failure():
    with pytest.raises(RuntimeError, match="Unresolved type"):
        quick_generate(descriptors(), "java")
