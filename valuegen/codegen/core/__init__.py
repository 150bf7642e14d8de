"""
Core code generation components.

Provides the descriptor model, schema classification, planning engine and
the base classes used by all language emitters.
"""

from .generator import CodeGenerator, GenerationResult, generate_code
from .descriptors import (
    DescriptorError,
    MemberDescriptor,
    TargetDescriptor,
    TypeDescriptor,
    TypeKind,
    load_targets,
    parse_type,
)
from .diagnostics import (
    BuilderReturnTypeMismatch,
    Diagnostic,
    DiagnosticCollector,
    DiagnosticsSink,
    GeneratorError,
    InvalidTargetShape,
    Severity,
    UnresolvedType,
)
from .schema import (
    CategoryKind,
    FieldCategory,
    FieldSchema,
    OptionalWrapper,
    ScalarKind,
    SchemaError,
    TypeSchema,
    Visibility,
)
from .resolver import Shape, TypeResolver
from .classifier import classify
from .nullness import enforce_non_null
from .validator import validate_target
from .engine import build_generation_plan, plan_batch, plan_target
from .plan import GenerationPlan, TypeDefinition
from .naming import NameSanitizer, singular_name, unique_variable
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    # Descriptor model
    "DescriptorError",
    "MemberDescriptor",
    "TargetDescriptor",
    "TypeDescriptor",
    "TypeKind",
    "load_targets",
    "parse_type",
    # Diagnostics
    "BuilderReturnTypeMismatch",
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticsSink",
    "GeneratorError",
    "InvalidTargetShape",
    "Severity",
    "UnresolvedType",
    # Schema system - core data structures
    "CategoryKind",
    "FieldCategory",
    "FieldSchema",
    "OptionalWrapper",
    "ScalarKind",
    "SchemaError",
    "TypeSchema",
    "Visibility",
    # Resolution, classification and planning
    "Shape",
    "TypeResolver",
    "classify",
    "enforce_non_null",
    "validate_target",
    "build_generation_plan",
    "plan_batch",
    "plan_target",
    "GenerationPlan",
    "TypeDefinition",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "singular_name",
    "unique_variable",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
