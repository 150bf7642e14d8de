import pytest

from valuegen.codegen.core.generator import CodeGenerator
from valuegen.codegen.languages.java import JavaGenerator
from valuegen.codegen.languages.python import PythonGenerator
from valuegen.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    is_language_supported,
    list_all_language_info,
    list_supported_languages,
)


def test_builtin_languages():
    assert list_supported_languages() == ["java", "python"]
    assert is_language_supported("JAVA")
    assert is_language_supported("py")
    assert not is_language_supported("cobol")


@pytest.mark.parametrize(
    "name, cls", [("java", JavaGenerator), ("jav", JavaGenerator), ("py", PythonGenerator)]
)
def test_get_generator(name, cls):
    assert isinstance(get_generator(name), cls)


def test_alias_uses_language_defaults():
    assert get_generator("jav").config.indent_size == 2
    assert get_generator("py", {"indent_size": 8}).config.indent_size == 8


def test_unknown_language():
    with pytest.raises(RegistryError, match="Available: java, python"):
        get_generator("cobol")


def test_missing_config_file(tmp_path):
    with pytest.raises(RegistryError, match="not found"):
        get_generator("java", tmp_path / "absent.json")


def test_language_info():
    info = get_language_info("py")
    assert info["name"] == "python"
    assert info["file_extension"] == ".py"
    assert info["aliases"] == ["py"]
    assert info["class"] == "PythonGenerator"
    assert set(list_all_language_info()) == {"java", "python"}


class TestGeneratorRegistry:
    def test_rejects_non_generators(self):
        with pytest.raises(RegistryError):
            GeneratorRegistry().register("text", str)

    def test_alias_conflicts(self):
        registry = GeneratorRegistry()
        registry.register("java", JavaGenerator, aliases=["j"])
        with pytest.raises(RegistryError, match="already points"):
            registry.register("python", PythonGenerator, aliases=["j"])
        with pytest.raises(RegistryError, match="primary language"):
            registry.register("py3", PythonGenerator, aliases=["java"])

    def test_unregister(self):
        registry = GeneratorRegistry()
        registry.register("java", JavaGenerator, aliases=["j"])
        registry.unregister("java")
        assert not registry.is_supported("j")
        assert registry.list_languages() == []

    def test_invalid_config_type(self):
        registry = GeneratorRegistry()
        registry.register("java", JavaGenerator)
        with pytest.raises(RegistryError, match="Invalid config type"):
            registry.create_generator("java", 42)

    def test_list_all_names(self):
        registry = GeneratorRegistry()
        registry.register("python", PythonGenerator, aliases=["py", "python3"])
        assert registry.list_all_names() == {"python": ["python", "py", "python3"]}
        assert issubclass(registry.get_generator_class("PY"), CodeGenerator)
