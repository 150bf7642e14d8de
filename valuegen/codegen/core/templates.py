"""
Jinja2 rendering for emitter templates.

Each emitter keeps its templates in a ``templates/`` directory next to its
generator module. Templates are rendered with block trimming and strict
undefined variables, plus two filters for laying out generated source:

- ``indent``: prefix every non-blank line with a width or a literal string
- ``comment``: turn text into line comments of a given marker
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from jinja2 import (
    BaseLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
)

from ...logging_config import get_logger

logger = get_logger(__name__)


class TemplateError(Exception):
    """Raised when a template is missing or fails to render."""

    pass


def indent_lines(value: Any, width: Union[int, str] = 4) -> str:
    prefix = width if isinstance(width, str) else " " * width
    return "\n".join(
        prefix + line if line.strip() else line for line in str(value).split("\n")
    )


def comment_lines(value: Any, marker: str = "//") -> str:
    return "\n".join(
        f"{marker} {line}" if line.strip() else marker for line in str(value).split("\n")
    )


class TemplateEngine:
    """Renders named templates from a directory, or from memory."""

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir
        self._env = Environment(
            loader=self._make_loader(template_dir),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters["indent"] = indent_lines
        self._env.filters["comment"] = comment_lines

    @staticmethod
    def _make_loader(template_dir: Optional[Path]) -> BaseLoader:
        if template_dir is not None and template_dir.is_dir():
            return FileSystemLoader(str(template_dir))
        if template_dir is not None:
            logger.warning(f"Template directory not found: {template_dir}")
        return DictLoader({})

    def template_exists(self, template_name: str) -> bool:
        return template_name in self._env.list_templates()

    def add_template(self, name: str, content: str):
        """Register an in-memory template, replacing a directory loader."""
        if not isinstance(self._env.loader, DictLoader):
            self._env.loader = DictLoader({})
        self._env.loader.mapping[name] = content

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        try:
            return self._env.get_template(template_name).render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, source: str, context: Dict[str, Any]) -> str:
        try:
            return self._env.from_string(source).render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template string: {e}") from e


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, in-memory when no directory is given."""
    return TemplateEngine(template_dir)
