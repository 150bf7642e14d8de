"""
Java code generator implementation.

Renders one ``<Target>Builder.java`` per target, with the immutable value
class nested inside the builder.
"""

from pathlib import Path
from typing import Any, Dict, List

from ...core.generator import CodeGenerator
from ...core.plan import GenerationPlan
from .naming import builder_file_name
from .renderer import JavaRenderer


class JavaGenerator(CodeGenerator):
    """Code generator for Java builders."""

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "java"

    @property
    def file_extension(self) -> str:
        """Return Java file extension."""
        return ".java"

    def get_template_directory(self) -> Path:
        """Return the Java templates directory."""
        return Path(__file__).parent / "templates"

    def file_name(self, plan: GenerationPlan) -> str:
        return builder_file_name(plan.builder_name)

    def relative_path(self, plan: GenerationPlan) -> Path:
        """``foo/bar/FooBuilder.java`` for package ``foo.bar``."""
        if not plan.package:
            return Path(self.file_name(plan))
        return Path(*plan.package.split(".")) / self.file_name(plan)

    def generate(self, plan: GenerationPlan) -> str:
        """Generate the builder source for one plan."""
        renderer = JavaRenderer(plan, self.config)
        context = self._build_context(plan, renderer)
        return self.render_template("builder.java.j2", context)

    def _build_context(self, plan: GenerationPlan, renderer: JavaRenderer) -> Dict[str, Any]:
        builder_blocks = renderer.render_type(plan.builder)
        value_blocks = renderer.render_type(plan.value)
        value_header = renderer.value_header()
        annotation = renderer.annotation()

        # Imports are known only once every block has been rendered.
        return {
            "add_comments": self.config.add_comments,
            "header": self.header_comment(plan),
            "package": plan.package,
            "imports": renderer.types.import_groups(),
            "annotation": annotation,
            "modifiers": renderer.builder_modifiers(),
            "builder": plan.builder_name,
            "ind": self.config.indent,
            "builder_blocks": [self._join(b) for b in builder_blocks],
            "value_header": value_header,
            "value_blocks": [self._join(b) for b in value_blocks],
        }

    @staticmethod
    def _join(lines: List[str]) -> str:
        return "\n".join(lines)


def create_java_generator(config=None) -> JavaGenerator:
    """Create a Java generator with the given configuration."""
    return JavaGenerator(config)
