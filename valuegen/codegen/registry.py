"""
Language registry: maps language names and aliases to emitter classes.

The built-in emitters are registered the first time the shared registry is
used. Lookups are case-insensitive.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from ..logging_config import get_logger
from .core.config import ConfigError, GeneratorConfig, load_config
from .core.generator import CodeGenerator

logger = get_logger(__name__)

ConfigSource = Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


@dataclass
class _Entry:
    name: str
    generator_class: Type[CodeGenerator]
    aliases: List[str] = field(default_factory=list)


class GeneratorRegistry:
    """Emitter classes by primary language name, plus aliases."""

    def __init__(self):
        self._entries: Dict[str, _Entry] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register ``generator_class`` under ``language`` and its aliases.

        An already registered language is left alone unless ``replace`` is
        set.

        Raises:
            RegistryError: If the class is not a CodeGenerator, or an alias is
                taken by another language
        """
        if not (isinstance(generator_class, type) and issubclass(generator_class, CodeGenerator)):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        name = language.lower()
        if name in self._entries and not replace:
            logger.debug(f"Language {name} already registered")
            return

        alias_keys = [a.lower() for a in aliases or () if a.lower() != name]
        if not replace:
            for alias in alias_keys:
                if alias in self._entries:
                    raise RegistryError(f"Alias '{alias}' conflicts with existing primary language")
                owner = self._aliases.get(alias)
                if owner is not None and owner != name:
                    raise RegistryError(f"Alias '{alias}' already points to '{owner}'")

        self._entries[name] = _Entry(name, generator_class, sorted(alias_keys))
        for alias in alias_keys:
            self._aliases[alias] = name

    def unregister(self, language: str):
        """Remove a language and every alias pointing at it."""
        name = self._resolve(language)
        self._entries.pop(name, None)
        self._aliases = {a: n for a, n in self._aliases.items() if n != name}

    def _resolve(self, language: str) -> str:
        key = language.lower()
        return self._aliases.get(key, key)

    def _entry(self, language: str) -> _Entry:
        entry = self._entries.get(self._resolve(language))
        if entry is None:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            )
        return entry

    def is_supported(self, language: str) -> bool:
        return self._resolve(language) in self._entries

    def get_generator_class(self, language: str) -> Type[CodeGenerator]:
        return self._entry(language).generator_class

    def create_generator(self, language: str, config: ConfigSource = None) -> CodeGenerator:
        """
        Instantiate the emitter for ``language``.

        Args:
            language: Language name or alias
            config: Ready configuration, overrides dict or JSON config file

        Raises:
            RegistryError: If the language is unknown or the config is invalid
        """
        entry = self._entry(language)
        try:
            if isinstance(config, GeneratorConfig):
                resolved = config
            elif isinstance(config, (str, Path)):
                resolved = load_config(entry.name, config_file=config)
            elif config is None or isinstance(config, dict):
                resolved = load_config(entry.name, custom_config=config)
            else:
                raise RegistryError(f"Invalid config type: {type(config).__name__}")
        except ConfigError as e:
            raise RegistryError(f"Failed to create {entry.name} generator: {e}") from e
        return entry.generator_class(resolved)

    def list_languages(self) -> List[str]:
        return sorted(self._entries)

    def list_all_names(self) -> Dict[str, List[str]]:
        """Every accepted name per language, primary name first."""
        return {name: [name] + entry.aliases for name, entry in self._entries.items()}

    def get_language_info(self, language: str) -> Dict[str, Any]:
        entry = self._entry(language)
        generator = self.create_generator(entry.name)
        return {
            "name": generator.language_name,
            "class": entry.generator_class.__name__,
            "module": entry.generator_class.__module__,
            "file_extension": generator.file_extension,
            "aliases": list(entry.aliases),
            "indent_size": generator.config.indent_size,
        }


_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """The shared registry, with the built-in emitters registered."""
    global _registry
    if _registry is None:
        _registry = GeneratorRegistry()
        _register_builtin_generators(_registry)
    return _registry


def _register_builtin_generators(registry: GeneratorRegistry):
    from .languages.java import JavaGenerator
    from .languages.python import PythonGenerator

    registry.register("java", JavaGenerator, aliases=["jav"])
    registry.register("python", PythonGenerator, aliases=["py"])
    logger.debug(f"Registered generators: {registry.list_languages()}")


def get_generator(language: str, config: ConfigSource = None) -> CodeGenerator:
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)


def list_all_language_info() -> Dict[str, Dict[str, Any]]:
    """Info for every registered language, skipping ones that fail to load."""
    result = {}
    for language in list_supported_languages():
        try:
            result[language] = get_language_info(language)
        except RegistryError as e:
            logger.warning(f"Skipping {language}: {e}")
    return result
