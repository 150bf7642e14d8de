"""
Python code generator implementation.

Renders one importable module per target: an ``abc.ABC`` contract class,
the builder class and the immutable value class nested inside it.
"""

from pathlib import Path
from typing import Any, Dict, List

from ...core.generator import CodeGenerator
from ...core.plan import ConstructorKind, GenerationPlan
from .naming import module_name
from .renderer import PythonRenderer

IMMUTABLE_BLOCKS = [
    [
        "def __setattr__(self, name, value):",
        '    raise AttributeError(f"{type(self).__name__} is immutable")',
    ],
    [
        "def __delattr__(self, name):",
        '    raise AttributeError(f"{type(self).__name__} is immutable")',
    ],
]


class PythonGenerator(CodeGenerator):
    """Code generator for Python value modules."""

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def file_name(self, plan: GenerationPlan) -> str:
        return module_name(plan.builder_name) + self.file_extension

    def generate(self, plan: GenerationPlan) -> str:
        """Generate the module for one plan."""
        renderer = PythonRenderer(plan, self.config)
        context = self._build_context(plan, renderer)
        return self.render_template("module.py.j2", context)

    def _build_context(self, plan: GenerationPlan, renderer: PythonRenderer) -> Dict[str, Any]:
        builder, value = plan.builder, plan.value

        builder_blocks = [renderer.render_builder_init(builder)]
        for kind in (ConstructorKind.COPY_VALUE, ConstructorKind.COPY_BUILDER):
            builder_blocks.append(
                renderer.render_copy_constructor(builder, builder.constructor(kind))
            )
        builder_blocks.extend(renderer.render_methods(builder))

        value_blocks = [renderer.render_value_init(value)]
        value_blocks.extend(self._immutable_blocks())
        value_blocks.extend(renderer.render_methods(value))

        return {
            "add_comments": self.config.add_comments,
            "header": self.header_comment(plan),
            "qualified_target": plan.qualified_target_name,
            "runtime_module": self.config.runtime_module,
            "ind": self.config.indent,
            "contract": renderer.contract_name,
            "contract_methods": renderer.contract_methods(),
            "builder": renderer.builder_name,
            "builder_blocks": [self._join(b) for b in builder_blocks],
            "value": value.name,
            "slots": renderer.slots(value),
            "value_blocks": [self._join(b) for b in value_blocks],
            "emit_repr": self.config.custom.get("emit_repr", True),
        }

    def _immutable_blocks(self) -> List[List[str]]:
        indent = self.config.indent
        return [
            [line.replace("    ", indent, 1) if line.startswith("    ") else line for line in block]
            for block in IMMUTABLE_BLOCKS
        ]

    @staticmethod
    def _join(lines: List[str]) -> str:
        return "\n".join(lines)


def create_python_generator(config=None) -> PythonGenerator:
    """Create a Python generator with the given configuration."""
    return PythonGenerator(config)
