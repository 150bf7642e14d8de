"""
valuegen Code Generation Module

Generates immutable value types and their builders from target descriptors.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..logging_config import get_logger
from .registry import GeneratorRegistry, get_generator, list_supported_languages
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.descriptors import TargetDescriptor, load_targets
from .core.diagnostics import DiagnosticCollector
from .core.engine import plan_batch
from .core.resolver import TypeResolver
from .core.config import GeneratorConfig, ConfigManager, load_config

logger = get_logger(__name__)

# Version info
__version__ = "0.1.0"


def create_resolver(config: GeneratorConfig) -> TypeResolver:
    """Build the shared resolution context a configuration describes."""
    return TypeResolver(
        known_types=config.known_types,
        inaccessible_types=config.inaccessible_types,
        shape_aliases=config.shape_aliases,
    )


class BatchResult:
    """Outcome of generating code for one descriptor document."""

    def __init__(
        self,
        targets: List[TargetDescriptor],
        results: List[Optional[GenerationResult]],
        diagnostics: DiagnosticCollector,
    ):
        self.targets = targets
        self.results = results
        self.diagnostics = diagnostics

    @property
    def generated(self) -> List[Tuple[TargetDescriptor, GenerationResult]]:
        return [
            (target, result)
            for target, result in zip(self.targets, self.results)
            if result is not None and result.success
        ]

    @property
    def failed_targets(self) -> List[str]:
        return [
            target.ref
            for target, result in zip(self.targets, self.results)
            if result is None or not result.success
        ]

    @property
    def success(self) -> bool:
        return not self.failed_targets


def generate_from_descriptors(
    data: Any,
    language: str = "java",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> BatchResult:
    """
    Generate code for every target of a descriptor document.

    Args:
        data: Parsed descriptor JSON (see :func:`load_targets`)
        language: Target language name or alias
        config: Generator configuration, dict overrides or config file path

    Returns:
        BatchResult with one entry per target, in input order
    """
    targets = load_targets(data)
    generator = get_generator(language, config)
    resolver = create_resolver(generator.config)
    diagnostics = DiagnosticCollector()

    plans = plan_batch(targets, resolver, diagnostics, generator.config.max_workers)

    results: List[Optional[GenerationResult]] = []
    for plan in plans:
        if plan is None:
            results.append(None)
            continue
        result = generate_code(generator, plan)
        if result.success:
            result.metadata["relative_path"] = str(generator.relative_path(plan))
        results.append(result)

    logger.info(
        f"Generated {sum(1 for r in results if r and r.success)} of {len(targets)} target(s)"
    )
    return BatchResult(targets, results, diagnostics)


def quick_generate(data: Any, language: str = "java", **options) -> Dict[str, str]:
    """
    Quick code generation from descriptor data.

    Args:
        data: Descriptor JSON (dict/list/str)
        language: Target language
        **options: Generator options

    Returns:
        Generated code keyed by file name
    """
    if isinstance(data, str):
        import json

        data = json.loads(data)

    batch = generate_from_descriptors(data, language, options or None)
    if not batch.success:
        messages = [str(d) for d in batch.diagnostics.errors]
        messages.extend(
            r.error_message for r in batch.results if r is not None and not r.success
        )
        raise RuntimeError(f"Code generation failed: {'; '.join(messages)}")

    return {result.file_name: result.code for _, result in batch.generated}


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "CodeGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "ConfigManager",
    "BatchResult",
    "create_resolver",
    "generate_from_descriptors",
    "quick_generate",
    "get_generator",
    "list_supported_languages",
    "load_config",
]
