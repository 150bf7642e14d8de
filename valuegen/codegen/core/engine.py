"""
Generation engine: target descriptors in, generation plans out.

Planning is pure over its inputs. Targets of a batch are independent, so a
batch may be planned on a thread pool; results always come back in input
order, with None for targets that failed validation.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from ...logging_config import get_logger
from .builder_generator import build_builder_type
from .descriptors import TargetDescriptor
from .diagnostics import DiagnosticsSink, GeneratorError, Severity
from .plan import GenerationPlan
from .resolver import TypeResolver
from .schema import TypeSchema, Visibility
from .validator import validate_target
from .value_generator import build_value_type

logger = get_logger(__name__)


def build_generation_plan(
    schema: TypeSchema, resolver: Optional[TypeResolver] = None
) -> GenerationPlan:
    """Plan the value and builder types for an already validated schema."""
    return GenerationPlan(
        package=schema.package,
        target_name=schema.target_name,
        builder=build_builder_type(schema, resolver),
        value=build_value_type(schema),
        public=schema.visibility is Visibility.PUBLIC,
        metadata={
            "field_count": len(schema.fields),
            "supports_to_builder": schema.supports_to_builder,
        },
    )


def plan_target(
    target: TargetDescriptor, resolver: TypeResolver, sink: DiagnosticsSink
) -> Optional[GenerationPlan]:
    """
    Validate one target and plan it.

    Errors are reported to ``sink`` and yield None.
    """
    schema = validate_target(target, resolver, sink)
    if schema is None:
        return None
    try:
        plan = build_generation_plan(schema, resolver)
    except GeneratorError as e:
        sink.report(Severity.ERROR, e.message, target.ref)
        return None
    logger.info(f"Planned {target.ref} -> {plan.builder_name}")
    return plan


def plan_batch(
    targets: Sequence[TargetDescriptor],
    resolver: TypeResolver,
    sink: DiagnosticsSink,
    max_workers: Optional[int] = None,
) -> List[Optional[GenerationPlan]]:
    """
    Plan every target of a batch.

    Args:
        targets: Candidate targets
        resolver: Shared, read-only resolution context
        sink: Diagnostics sink; must tolerate concurrent reports when
            ``max_workers`` is greater than one
        max_workers: Thread count; None or 1 plans sequentially

    Returns:
        One entry per target, in input order
    """
    resolver = resolver.with_known_types(t.qualified_name for t in targets)

    if not max_workers or max_workers <= 1 or len(targets) <= 1:
        plans = [plan_target(target, resolver, sink) for target in targets]
    else:
        logger.debug(f"Planning {len(targets)} targets on {max_workers} workers")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            plans = list(executor.map(lambda t: plan_target(t, resolver, sink), targets))

    planned = sum(1 for p in plans if p is not None)
    logger.info(f"Planned {planned} of {len(targets)} target(s)")
    return plans
