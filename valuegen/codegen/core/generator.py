"""
Emitter base class and the result of rendering one plan.

An emitter turns one :class:`GenerationPlan` into the text of one source
file. Subclasses name their language, their file extension and their
template directory; the base class owns configuration, the template engine
and the final whitespace normalization.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger
from .config import GeneratorConfig, load_config
from .diagnostics import GeneratorError
from .plan import GenerationPlan
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)

# Consecutive blank lines kept by format_code.
MAX_BLANK_LINES = 2


class CodeGenerator(ABC):
    """Base class of the language emitters."""

    def __init__(self, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None):
        if not isinstance(config, GeneratorConfig):
            config = load_config(self.language_name, custom_config=config)
        self.config = config
        self._template_engine: Optional[TemplateEngine] = None

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Registry name of the emitted language, e.g. ``java``."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Extension of emitted files, including the dot."""

    @abstractmethod
    def generate(self, plan: GenerationPlan) -> str:
        """Render the source text for ``plan``."""

    @abstractmethod
    def file_name(self, plan: GenerationPlan) -> str:
        """File name, without directories, the generated code belongs in."""

    def get_template_directory(self) -> Optional[Path]:
        """Directory holding this emitter's templates; None keeps them in memory."""
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        if self._template_engine is None:
            self._template_engine = create_template_engine(self.get_template_directory())
        return self._template_engine

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        return self.template_engine.template_exists(template_name)

    def relative_path(self, plan: GenerationPlan) -> Path:
        """Path of the generated file below an output root."""
        return Path(self.file_name(plan))

    def header_comment(self, plan: GenerationPlan) -> str:
        return f"Generated by valuegen from {plan.qualified_target_name}. Do not edit."

    def validate_plan(self, plan: GenerationPlan) -> List[str]:
        """Warnings worth showing for a plan that still renders."""
        if not plan.value.fields:
            return [f"{plan.qualified_target_name} has no fields"]
        return []

    def format_code(self, code: str) -> str:
        """Strip trailing whitespace, squeeze blank runs and apply line endings."""
        lines: List[str] = []
        blanks = 0
        for line in code.split("\n"):
            line = line.rstrip()
            blanks = blanks + 1 if not line else 0
            if blanks <= MAX_BLANK_LINES:
                lines.append(line)

        code = "\n".join(lines).strip("\n") + "\n"
        if self.config.line_ending != "\n":
            code = code.replace("\n", self.config.line_ending)
        return code


@dataclass
class GenerationResult:
    """Rendered code for one plan, or the reason rendering failed."""

    code: str
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    error_message: Optional[str] = None
    exception: Optional[Exception] = None

    @property
    def file_name(self) -> Optional[str]:
        return self.metadata.get("file_name")

    @classmethod
    def error(cls, message: str, exception: Optional[Exception] = None) -> "GenerationResult":
        return cls(code="", success=False, error_message=message, exception=exception)


def generate_code(generator: CodeGenerator, plan: GenerationPlan) -> GenerationResult:
    """
    Render ``plan`` with ``generator``, turning rendering errors into a result.

    Args:
        generator: Emitter to use
        plan: Plan of one target

    Returns:
        GenerationResult with the formatted code and file metadata
    """
    target = plan.qualified_target_name
    try:
        warnings = generator.validate_plan(plan)
        code = generator.format_code(generator.generate(plan))
    except (GeneratorError, TemplateError) as e:
        logger.error(f"Code generation failed for {target}: {e}")
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "file_name": generator.file_name(plan),
        "target": target,
        "builder": plan.builder_name,
        **plan.metadata,
    }
    logger.debug(f"Rendered {metadata['file_name']} for {target}")
    return GenerationResult(code, warnings, metadata)
