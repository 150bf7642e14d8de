import pytest

from valuegen.codegen.core.templates import TemplateError, create_template_engine


@pytest.fixture
def engine():
    return create_template_engine()


def test_in_memory_template(engine):
    engine.add_template("greeting.j2", "Hello {{ name }}!")
    assert engine.template_exists("greeting.j2")
    assert engine.render_template("greeting.j2", {"name": "value"}) == "Hello value!"


def test_directory_templates(tmp_path):
    (tmp_path / "hello.j2").write_text("{{ name }}\n{% if name %}\nset\n{% endif %}\n")
    engine = create_template_engine(tmp_path)
    assert engine.template_exists("hello.j2")
    assert engine.render_template("hello.j2", {"name": "x"}) == "x\nset\n"


def test_missing_directory_falls_back_to_memory(tmp_path):
    engine = create_template_engine(tmp_path / "absent")
    assert not engine.template_exists("hello.j2")
    engine.add_template("hello.j2", "hi")
    assert engine.render_template("hello.j2", {}) == "hi"


def test_indent_filter(engine):
    assert engine.render_string("{{ v | indent(2) }}", {"v": "a\n\nb"}) == "  a\n\n  b"
    assert engine.render_string("{{ v | indent('\t') }}", {"v": "a"}) == "\ta"


def test_comment_filter(engine):
    assert engine.render_string("{{ v | comment('#') }}", {"v": "a\n"}) == "# a\n#"


def test_undefined_variable_is_an_error(engine):
    with pytest.raises(TemplateError):
        engine.render_string("{{ missing }}", {})


def test_missing_template(engine):
    with pytest.raises(TemplateError):
        engine.render_template("nope.j2", {})


def test_language_templates_are_found(java_generator, python_generator):
    assert java_generator.template_exists("builder.java.j2")
    assert python_generator.template_exists("module.py.j2")
