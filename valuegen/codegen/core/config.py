"""
Generator configuration.

Settings are layered: per-language defaults, then an optional JSON file,
then explicit overrides. Keys that are not :class:`GeneratorConfig` fields
are kept in ``custom`` for the emitter that understands them.
"""

import json
from copy import deepcopy
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)

SHAPE_NAMES = ("list", "set", "map")
LINE_ENDINGS = ("\n", "\r\n")

LANGUAGE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "java": {
        "indent_size": 2,
        "generated_annotation": "javax.annotation.Generated",
        "custom": {"generator_name": "valuegen"},
    },
    "python": {
        "indent_size": 4,
        "runtime_module": "valuegen.runtime",
        "custom": {"emit_repr": True},
    },
}


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Settings shared by planning and every emitter."""

    output_dir: Optional[str] = None

    # Layout of emitted code
    indent_size: int = 4
    use_tabs: bool = False
    line_ending: str = "\n"
    add_comments: bool = True

    # Java: qualified name of the annotation put on builders, None for none
    generated_annotation: Optional[str] = None

    # Python: module generated code imports as ``_rt``
    runtime_module: str = "valuegen.runtime"

    # Planning threads; None plans sequentially
    max_workers: Optional[int] = None

    # Type resolution
    known_types: Optional[List[str]] = None
    inaccessible_types: List[str] = field(default_factory=list)
    shape_aliases: Dict[str, List[str]] = field(default_factory=dict)

    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def indent(self) -> str:
        """One level of indentation."""
        return "\t" if self.use_tabs else " " * self.indent_size


_FIELD_NAMES = frozenset(f.name for f in fields(GeneratorConfig))


class ConfigManager:
    """Builds configurations from language defaults, files and overrides."""

    def __init__(self, defaults: Optional[Dict[str, Dict[str, Any]]] = None):
        self._defaults = deepcopy(LANGUAGE_DEFAULTS if defaults is None else defaults)

    def get_config(
        self,
        language: Optional[str] = None,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Merge the layers for ``language`` into one configuration.

        Args:
            language: Language name, None for the neutral defaults
            custom_config: Overrides applied last
            config_file: JSON file applied between defaults and overrides

        Raises:
            ConfigError: If the file is missing or malformed
        """
        settings = deepcopy(self._defaults.get(language, {}))
        for layer in (self._read_file(config_file) if config_file else None, custom_config):
            if layer:
                settings.update(layer)
        return self._to_config(settings)

    def _read_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        if path.suffix.lower() != ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")
        logger.debug(f"Loaded configuration from {path}")
        return data

    @staticmethod
    def _to_config(settings: Dict[str, Any]) -> GeneratorConfig:
        known = {k: v for k, v in settings.items() if k in _FIELD_NAMES}
        extra = {k: v for k, v in settings.items() if k not in _FIELD_NAMES}
        if extra:
            known["custom"] = {**(known.get("custom") or {}), **extra}
        return GeneratorConfig(**known)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Write ``config`` as a flat JSON object, custom keys inlined."""
        data = asdict(config)
        data.update(data.pop("custom"))
        try:
            with Path(output_path).open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {output_path}: {e}") from e

    def validate_config(self, config: GeneratorConfig, language: str) -> List[str]:
        """Return a message per invalid setting, empty when the config is usable."""
        problems = []
        if config.indent_size < 1:
            problems.append(f"Invalid indent_size: {config.indent_size}")
        if config.line_ending not in LINE_ENDINGS:
            problems.append(f"Invalid line_ending: {config.line_ending!r}")
        if config.max_workers is not None and config.max_workers < 1:
            problems.append(f"Invalid max_workers: {config.max_workers}")
        problems.extend(
            f"Invalid shape in shape_aliases: {shape}"
            for shape in config.shape_aliases
            if shape not in SHAPE_NAMES
        )

        if language == "java" and config.generated_annotation:
            if not _is_dotted_name(config.generated_annotation):
                problems.append(f"Invalid generated_annotation: {config.generated_annotation}")
        elif language == "python" and not _is_dotted_name(config.runtime_module):
            problems.append(f"Invalid runtime_module: {config.runtime_module}")
        return problems


def _is_dotted_name(name: Optional[str]) -> bool:
    return bool(name) and all(part.isidentifier() for part in name.split("."))


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the shared configuration manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: Optional[str] = None,
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """Load the merged configuration for ``language`` from the shared manager."""
    return get_config_manager().get_config(language, custom_config, config_file)
