import json

import pytest

from valuegen.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
)


def test_language_defaults():
    java = load_config("java")
    assert java.indent_size == 2
    assert java.generated_annotation == "javax.annotation.Generated"
    assert java.custom["generator_name"] == "valuegen"

    python = load_config("python")
    assert python.indent_size == 4
    assert python.runtime_module == "valuegen.runtime"
    assert python.generated_annotation is None


def test_overrides_and_custom_keys():
    config = load_config("python", custom_config={"indent_size": 2, "emit_repr": False})
    assert config.indent == "  "
    assert config.custom["emit_repr"] is False


def test_defaults_are_not_shared():
    manager = ConfigManager()
    first = manager.get_config("java", custom_config={"flavour": "a"})
    second = manager.get_config("java")
    assert "flavour" in first.custom
    assert "flavour" not in second.custom


def test_tabs():
    assert GeneratorConfig(use_tabs=True).indent == "\t"


def test_config_file(tmp_path):
    path = tmp_path / "valuegen.json"
    path.write_text(json.dumps({"indent_size": 3, "known_types": ["com.example.Address"]}))
    config = load_config("java", config_file=path, custom_config={"max_workers": 2})
    assert config.indent_size == 3
    assert config.known_types == ["com.example.Address"]
    assert config.max_workers == 2


@pytest.mark.parametrize(
    "name, content, message",
    [
        ("missing.json", None, "not found"),
        ("config.yaml", "indent_size: 2", "must be JSON"),
        ("broken.json", "{", "Invalid JSON"),
        ("list.json", "[]", "JSON object"),
    ],
)
def test_bad_config_files(tmp_path, name, content, message):
    path = tmp_path / name
    if content is not None:
        path.write_text(content)
    with pytest.raises(ConfigError, match=message):
        load_config("java", config_file=path)


def test_save_config(tmp_path):
    manager = ConfigManager()
    path = tmp_path / "saved.json"
    manager.save_config(manager.get_config("python"), path)
    saved = json.loads(path.read_text())
    assert saved["runtime_module"] == "valuegen.runtime"
    assert saved["emit_repr"] is True
    assert "custom" not in saved


def test_validate_config():
    manager = ConfigManager()
    assert manager.validate_config(load_config("java"), "java") == []

    problems = manager.validate_config(
        GeneratorConfig(
            indent_size=0,
            max_workers=0,
            line_ending="\r",
            shape_aliases={"tuple": ["x.Tuple"]},
            generated_annotation="javax.annotation.1Generated",
        ),
        "java",
    )
    assert len(problems) == 5

    problems = manager.validate_config(GeneratorConfig(runtime_module="not a module"), "python")
    assert problems == ["Invalid runtime_module: not a module"]
