"""
Java rendering of generation plans.

Produces the member blocks of one ``<Target>Builder.java`` file: the
builder's fields, constructors and methods, and the same for the nested
``Value`` class. Overloads map directly onto Java overloads.
"""

import json
from typing import List, Optional

from ...core.config import GeneratorConfig
from ...core.naming import unique_variable
from ...core.plan import (
    ConstructorKind,
    ConstructorSpec,
    EqualityRule,
    GenerationPlan,
    HashAccumulate,
    HashRule,
    MethodSpec,
    SelfField,
    StringRule,
    TypeDefinition,
    TypeRef,
    TypeRefKind,
    TypeRole,
)
from ...core.render import PlanRenderer, walk_statements
from ...core.schema import CategoryKind, FieldCategory
from .naming import create_java_sanitizer
from .types import JavaTypeMapper

EMPTY_FACTORIES = {
    CategoryKind.COLLECTION: "emptyList",
    CategoryKind.SET: "emptySet",
    CategoryKind.MAP: "emptyMap",
}

UNMODIFIABLE_FACTORIES = {
    CategoryKind.COLLECTION: "unmodifiableList",
    CategoryKind.SET: "unmodifiableSet",
    CategoryKind.MAP: "unmodifiableMap",
}

# Width of "return " so string concatenations line up under the first operand.
RETURN_CONTINUATION = " " * len("return ")


def _java_string(value: str) -> str:
    return json.dumps(value)


class JavaRenderer(PlanRenderer):
    """Renders the builder and value classes of one plan as Java members."""

    def __init__(self, plan: GenerationPlan, config: GeneratorConfig):
        super().__init__(plan, config)
        package = plan.package
        builder = plan.builder_name
        head = plan.target_name.split(".", 1)[0]

        def qualify(name: str) -> str:
            return f"{package}.{name}" if package else name

        self.types = JavaTypeMapper(
            package,
            local_names={
                head: qualify(head),
                builder: qualify(builder),
                plan.value.name: qualify(f"{builder}.{plan.value.name}"),
            },
        )
        self.names = {
            TypeRefKind.TARGET: plan.target_name,
            TypeRefKind.BUILDER: builder,
            TypeRefKind.VALUE_TYPE: plan.value.name,
        }
        self.locals = create_java_sanitizer()
        self.continuation = self.indent * 2
        self._temp: Optional[str] = None

    # Names and types

    def type_ref(self, type_ref: TypeRef) -> str:
        return self.types.type_ref(type_ref, self.names)

    def field_type(self, category: FieldCategory) -> str:
        return self.types.type_name(category.type)

    def util(self, name: str) -> str:
        return self.types.compress(f"java.util.{name}")

    def lang(self, name: str) -> str:
        return self.types.compress(f"java.lang.{name}")

    def local(self, name: str) -> str:
        return self.locals.escape(name)

    def own_field(self, name: str) -> str:
        """Storage of the current instance, qualified when a local shadows it."""
        if name in self.scope:
            return f"this.{name}"
        return name

    def element_args(self, category: FieldCategory) -> str:
        if category.kind is CategoryKind.MAP:
            return self.types.type_arguments((category.key, category.value))
        return self.types.type_name(category.element)

    # Expressions

    def expr_var(self, node) -> str:
        return self.local(node.name)

    def expr_this(self, node) -> str:
        return "this"

    def expr_self_field(self, node) -> str:
        return self.own_field(node.name)

    def expr_field_of(self, node) -> str:
        return f"{self.expr(node.target)}.{node.name}"

    def expr_getter_call(self, node) -> str:
        return f"{self.expr(node.target)}.{node.name}()"

    def expr_literal(self, node) -> str:
        value = node.value
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return _java_string(value)
        return repr(value)

    def expr_is_null(self, node) -> str:
        op = "!=" if node.negate else "=="
        return f"{self.expr(node.expr)} {op} null"

    def expr_not(self, node) -> str:
        return f"!({self.expr(node.expr)})"

    def expr_identical(self, node) -> str:
        return f"{self.expr(node.left)} == {self.expr(node.right)}"

    def expr_ternary(self, node) -> str:
        return (
            f"({self.expr(node.condition)}) ? {self.expr(node.then)} "
            f": {self.expr(node.otherwise)}"
        )

    def expr_new_container(self, node) -> str:
        category = node.category
        source = self.expr(node.source) if node.source is not None else ""
        return f"new {self.types.container_class(category)}<{self.element_args(category)}>({source})"

    def expr_empty_container(self, node) -> str:
        category = node.category
        factory = EMPTY_FACTORIES[category.kind]
        return f"{self.util('Collections')}.<{self.element_args(category)}>{factory}()"

    def expr_unmodifiable_view(self, node) -> str:
        factory = UNMODIFIABLE_FACTORIES[node.category.kind]
        return f"{self.util('Collections')}.{factory}({self.expr(node.expr)})"

    def expr_optional_empty(self, node) -> str:
        wrapper = self.types.compress(node.wrapper.qualified_name)
        return f"{wrapper}.{node.wrapper.empty_name}()"

    def expr_optional_maybe(self, node) -> str:
        wrapper = self.types.compress(node.wrapper.qualified_name)
        return f"{wrapper}.{node.wrapper.maybe_name}({self.expr(node.expr)})"

    def expr_cast(self, node) -> str:
        return f"({self.type_ref(node.type)}) {self.expr(node.expr)}"

    def expr_is_instance(self, node) -> str:
        return f"{self.expr(node.expr)} instanceof {self.types.raw_type_ref(node.type, self.names)}"

    def expr_invoke(self, node) -> str:
        args = ", ".join(self.expr(a) for a in node.args)
        return f"{node.method}({args})"

    def expr_iterator_of(self, node) -> str:
        return f"{self.expr(node.expr)}.iterator()"

    def expr_varargs_as_list(self, node) -> str:
        return f"{self.util('Arrays')}.asList({self.expr(node.expr)})"

    def expr_construct(self, node) -> str:
        type_name = self.type_ref(node.type)
        args = [self.expr(a) for a in node.args]
        if node.type.kind is TypeRefKind.VALUE_TYPE and args:
            lines = [f"new {type_name}("]
            lines.extend(f"{self.continuation}{arg}," for arg in args[:-1])
            lines.append(f"{self.continuation}{args[-1]})")
            return "\n".join(lines)
        return f"new {type_name}({', '.join(args)})"

    def expr_entry_key(self, node) -> str:
        return f"{self.expr(node.entry)}.getKey()"

    def expr_entry_value(self, node) -> str:
        return f"{self.expr(node.entry)}.getValue()"

    def expr_fields_differ(self, node) -> str:
        mine = self.own_field(node.name)
        theirs = f"{self.expr(node.other)}.{node.name}()"
        rule = node.rule
        if rule is EqualityRule.PRIMITIVE:
            return f"{mine} != {theirs}"
        if rule is EqualityRule.FLOAT_BITS:
            return f"{self.lang('Float')}.compare({theirs}, {mine}) != 0"
        if rule is EqualityRule.DOUBLE_BITS:
            return f"{self.lang('Double')}.compare({theirs}, {mine}) != 0"
        if rule is EqualityRule.ARRAY_DEEP:
            return f"!{self.util('Arrays')}.equals({mine}, {theirs})"
        return f"{mine} != null ? !{mine}.equals({theirs}) : {theirs} != null"

    def expr_hash_term(self, node) -> str:
        x = self.own_field(node.name)
        rule = node.rule
        if rule is HashRule.BOOLEAN:
            return f"({x} ? 1231 : 1237)"
        if rule is HashRule.WIDEN:
            return f"(int) {x}"
        if rule is HashRule.INT:
            return x
        if rule is HashRule.LONG_FOLD:
            return f"(int) ({x} ^ ({x} >>> 32))"
        if rule is HashRule.FLOAT_BITS:
            return f"({x} != +0.0f ? {self.lang('Float')}.floatToIntBits({x}) : 0)"
        if rule is HashRule.DOUBLE_FOLD:
            temp = self._temp
            return f"(int) ({temp} ^ ({temp} >>> 32))"
        if rule is HashRule.ARRAY_DEEP:
            return f"({x} != null ? {self.util('Arrays')}.hashCode({x}) : 0)"
        return f"({x} != null ? {x}.hashCode() : 0)"

    def expr_string_template(self, node) -> str:
        lines = [f'"{node.type_name}{{" +']
        for i, part in enumerate(node.parts):
            label = _java_string(("" if i == 0 else ", ") + part.name + "=")
            value = self.own_field(part.name)
            if part.rule is StringRule.ARRAY_ELEMENTS:
                value = f"{self.util('Arrays')}.toString({value})"
            lines.append(f"{RETURN_CONTINUATION}{label} + {value} +")
        lines.append(f"{RETURN_CONTINUATION}'}}'")
        return "\n".join(lines)

    # Statements

    def stmt_assign(self, node) -> List[str]:
        target = node.target
        if isinstance(target, SelfField):
            rendered = f"this.{target.name}"
        else:
            rendered = self.expr(target)
        return f"{rendered} = {self.expr(node.value)};".split("\n")

    def stmt_declare_local(self, node) -> List[str]:
        return [f"final {self.type_ref(node.type)} {self.local(node.name)} = {self.expr(node.value)};"]

    def stmt_return(self, node) -> List[str]:
        if node.value is None:
            return ["return;"]
        return f"return {self.expr(node.value)};".split("\n")

    def stmt_if(self, node) -> List[str]:
        return [f"if ({self.expr(node.condition)}) {{"] + self._suite(node.body)

    def stmt_throw_null_argument(self, node) -> List[str]:
        exception = self.lang("NullPointerException")
        return [f"throw new {exception}({_java_string(node.message)});"]

    def stmt_for_each(self, node) -> List[str]:
        header = (
            f"for ({self.type_ref(node.type)} {self.local(node.item)} "
            f": {self.expr(node.iterable)}) {{"
        )
        return [header] + self._suite(node.body)

    def stmt_for_each_entry(self, node) -> List[str]:
        header = (
            f"for ({self.type_ref(node.type)} {self.local(node.entry)} "
            f": {self.expr(node.mapping)}.entrySet()) {{"
        )
        return [header] + self._suite(node.body)

    def stmt_while_iterator(self, node) -> List[str]:
        iterator = self.expr(node.iterator)
        first = f"final {self.type_ref(node.type)} {self.local(node.item)} = {iterator}.next();"
        return (
            [f"while ({iterator}.hasNext()) {{"]
            + self.indented([first] + self.block(node.body))
            + ["}"]
        )

    def stmt_add_to(self, node) -> List[str]:
        return [f"{self.expr(node.container)}.add({self.expr(node.item)});"]

    def stmt_put_to(self, node) -> List[str]:
        return [
            f"{self.expr(node.container)}.put({self.expr(node.key)}, {self.expr(node.value)});"
        ]

    def stmt_expr_stmt(self, node) -> List[str]:
        return [f"{self.expr(node.expr)};"]

    def stmt_init_hash(self, node) -> List[str]:
        lines = [f"int {self.local(node.name)} = 1;"]
        if self._needs_temp():
            taken = [f.name for f in self.type_def.fields] + [node.name]
            self._temp = unique_variable("temp", taken)
            lines.append(f"long {self._temp};")
        lines.append("")
        return lines

    def stmt_hash_accumulate(self, node) -> List[str]:
        name = self.local(node.name)
        lines = []
        if node.term.rule is HashRule.DOUBLE_FOLD:
            field = self.own_field(node.term.name)
            lines.append(f"{self._temp} = {self.lang('Double')}.doubleToLongBits({field});")
        lines.append(f"{name} = 31 * {name} + {self.expr(node.term)};")
        return lines

    def _needs_temp(self) -> bool:
        return any(
            isinstance(stmt, HashAccumulate) and stmt.term.rule is HashRule.DOUBLE_FOLD
            for stmt in walk_statements(self.member.body)
        )

    def _suite(self, body) -> List[str]:
        return self.indented(self.block(body)) + ["}"]

    # Members

    def params(self, member) -> str:
        params = []
        for param in member.params:
            params.append(f"{self.type_ref(param.type)} {self.local(param.name)}")
        return ", ".join(params)

    def render_fields(self, type_def: TypeDefinition) -> List[str]:
        modifier = "private final" if type_def.role is TypeRole.VALUE else "private"
        return [
            f"{modifier} {self.field_type(f.category)} {f.name};" for f in type_def.fields
        ]

    def render_constructor(self, type_def: TypeDefinition, ctor: ConstructorSpec) -> List[str]:
        self.enter(type_def, ctor)
        modifier = "public" if ctor.public else "private"
        if ctor.kind is ConstructorKind.VALUE and ctor.params:
            lines = [f"{modifier} {type_def.name}("]
            params = [f"{self.type_ref(p.type)} {self.local(p.name)}" for p in ctor.params]
            lines.extend(f"{self.continuation}{p}," for p in params[:-1])
            lines.append(f"{self.continuation}{params[-1]}")
            lines.append(") {")
        else:
            lines = [f"{modifier} {type_def.name}({self.params(ctor)}) {{"]
        return lines + self._suite(ctor.body)

    def render_method(self, type_def: TypeDefinition, method: MethodSpec) -> List[str]:
        self.enter(type_def, method)
        self._temp = None
        lines = ["@Override"] if method.overrides else []
        modifiers = "public static" if method.static else "public"
        returns = self.type_ref(method.returns) if method.returns is not None else "void"
        lines.append(f"{modifiers} {returns} {method.name}({self.params(method)}) {{")
        return lines + self._suite(method.body)

    def render_type(self, type_def: TypeDefinition) -> List[List[str]]:
        """Member blocks of ``type_def`` in declaration order."""
        blocks = []
        fields = self.render_fields(type_def)
        if fields:
            blocks.append(fields)
        for ctor in type_def.constructors:
            blocks.append(self.render_constructor(type_def, ctor))
        for method in type_def.methods:
            blocks.append(self.render_method(type_def, method))
        return blocks

    def builder_modifiers(self) -> str:
        return "public final" if self.plan.builder.public else "final"

    def value_header(self) -> str:
        value = self.plan.value
        return f"private static final class {value.name} implements {self.type_ref(value.implements)}"

    def annotation(self) -> Optional[str]:
        name = self.config.generated_annotation
        if not name:
            return None
        generator = self.config.custom.get("generator_name", "valuegen")
        return f"@{self.types.use(name)}({_java_string(generator)})"

