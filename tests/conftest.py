"""Shared fixtures for valuegen tests."""

import pytest

from valuegen.codegen.core.descriptors import load_targets
from valuegen.codegen.core.diagnostics import DiagnosticCollector
from valuegen.codegen.core.engine import plan_target
from valuegen.codegen.core.resolver import TypeResolver
from valuegen.codegen.languages.java import JavaGenerator
from valuegen.codegen.languages.python import PythonGenerator

NULLABLE = "javax.annotation.Nullable"


def member(name, type_, nullable=False, **extra):
    data = {"name": name, "type": type_}
    if nullable:
        data["annotations"] = [NULLABLE]
    data.update(extra)
    return data


def target(name, *members, package="com.example", **extra):
    data = {"package": package, "name": name, "members": list(members)}
    data.update(extra)
    return data


def plan_for(data, resolver=None):
    """Plan a single descriptor dict, failing the test on diagnostics."""
    sink = DiagnosticCollector()
    (descriptor,) = load_targets(data)
    plan = plan_target(descriptor, resolver or TypeResolver(), sink)
    assert plan is not None, [str(d) for d in sink.diagnostics]
    return plan


def load_generated(code):
    """Execute a generated Python module and return its namespace."""
    namespace = {"__name__": "generated"}
    exec(compile(code, "<generated>", "exec"), namespace)
    return namespace


@pytest.fixture
def sink():
    return DiagnosticCollector()


@pytest.fixture
def resolver():
    return TypeResolver()


@pytest.fixture
def foo_descriptor():
    """The id/tags contract used throughout the emitter tests."""
    return target(
        "Foo",
        member("id", "String"),
        member("tags", "List<String>"),
        member("nick", "String", nullable=True),
    )


@pytest.fixture
def java_generator():
    return JavaGenerator()


@pytest.fixture
def python_generator():
    return PythonGenerator()


@pytest.fixture
def foo_module(foo_descriptor, python_generator):
    code = python_generator.generate(plan_for(foo_descriptor))
    return load_generated(code)
