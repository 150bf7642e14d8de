"""
Python rendering of generation plans.

Python has no overloading, so every method name declared more than once
becomes private implementations (``_tags__collection``) plus one public
dispatcher that chooses by argument count, then ``None``, then runtime shape.
"""

import json
from typing import List, Optional

from ...core.config import GeneratorConfig
from ...core.diagnostics import GeneratorError
from ...core.naming import to_snake_case
from ...core.plan import (
    ConstructorKind,
    ConstructorSpec,
    EqualityRule,
    GenerationPlan,
    HashRule,
    MethodRole,
    MethodSpec,
    NewContainer,
    SelfField,
    StringRule,
    TypeDefinition,
    TypeRef,
    TypeRefKind,
)
from ...core.render import PlanRenderer
from ...core.schema import CategoryKind, FieldCategory, ScalarKind
from .naming import create_parameter_sanitizer, create_python_sanitizer

RUNTIME_ALIAS = "_rt"

SPECIAL_METHODS = {
    MethodRole.EQUALS: "__eq__",
    MethodRole.HASH_CODE: "__hash__",
    MethodRole.TO_STRING: "__str__",
}

SCALAR_DEFAULTS = {
    ScalarKind.BOOLEAN: "False",
    ScalarKind.BYTE: "0",
    ScalarKind.SHORT: "0",
    ScalarKind.INT: "0",
    ScalarKind.LONG: "0",
    ScalarKind.CHAR: '"\\x00"',
    ScalarKind.FLOAT: "0.0",
    ScalarKind.DOUBLE: "0.0",
}

HASH_HELPERS = {
    HashRule.BOOLEAN: "hash_boolean",
    HashRule.WIDEN: "hash_widen",
    HashRule.INT: "hash_int",
    HashRule.LONG_FOLD: "hash_long",
    HashRule.FLOAT_BITS: "hash_float",
    HashRule.DOUBLE_FOLD: "hash_double",
    HashRule.ARRAY_DEEP: "array_hash",
    HashRule.STRUCTURAL: "structural_hash",
}

# Dispatch order for overloads of equal arity: most specific shape first.
SHAPE_RANKS = {
    TypeRefKind.SAME: 0,
    TypeRefKind.COLLECTION: 1,
    TypeRefKind.ITERATOR: 2,
    TypeRefKind.ITERABLE: 3,
    TypeRefKind.MAP: 4,
    TypeRefKind.OPTIONAL: 4,
    TypeRefKind.BUILDER: 4,
    TypeRefKind.TARGET: 4,
    TypeRefKind.VALUE_TYPE: 4,
}
UNTYPED_RANK = 5


def _is_varargs(method: MethodSpec) -> bool:
    return any(p.type.kind is TypeRefKind.VARARGS for p in method.params)


def _str_literal(value: str) -> str:
    return json.dumps(value)


class PythonRenderer(PlanRenderer):
    """Renders the contract, builder and value classes of one plan."""

    def __init__(self, plan: GenerationPlan, config: GeneratorConfig):
        super().__init__(plan, config)
        self.method_names = create_python_sanitizer()
        self.local_names = create_parameter_sanitizer()
        self.immutable = False

    # Names

    @property
    def contract_name(self) -> str:
        return self.plan.target_simple_name

    @property
    def builder_name(self) -> str:
        return self.plan.builder_name

    @property
    def value_name(self) -> str:
        return f"{self.plan.builder_name}.{self.plan.value.name}"

    def attr(self, field_name: str) -> str:
        return f"_{field_name}"

    def local(self, name: str) -> str:
        return self.local_names.escape(name)

    def public_name(self, method: MethodSpec) -> str:
        special = SPECIAL_METHODS.get(method.role)
        if special is not None:
            return special
        return self.method_names.escape(method.name)

    def impl_name(self, method: MethodSpec) -> str:
        if self.overloaded(method.name):
            return f"_{method.name}__{method.overload}"
        return self.public_name(method)

    def receiver(self, method) -> str:
        return "cls" if getattr(method, "static", False) else "self"

    # Shape tests

    def shape_test(self, type_ref: TypeRef, subject: str) -> Optional[str]:
        """Runtime test for an argument of ``type_ref``, None when untyped."""
        kind = type_ref.kind
        if kind is TypeRefKind.SAME:
            if type_ref.category.kind is CategoryKind.SET:
                return f"{RUNTIME_ALIAS}.is_set_like({subject})"
            return f"{RUNTIME_ALIAS}.is_sequence({subject})"
        if kind is TypeRefKind.COLLECTION:
            return f"{RUNTIME_ALIAS}.is_collection({subject})"
        if kind is TypeRefKind.ITERATOR:
            return f"{RUNTIME_ALIAS}.is_iterator({subject})"
        if kind is TypeRefKind.ITERABLE:
            return f"{RUNTIME_ALIAS}.is_iterable({subject})"
        if kind is TypeRefKind.MAP:
            return f"{RUNTIME_ALIAS}.is_mapping({subject})"
        if kind is TypeRefKind.OPTIONAL:
            return f"isinstance({subject}, {RUNTIME_ALIAS}.Optional)"
        if kind is TypeRefKind.TARGET:
            return f"isinstance({subject}, {self.contract_name})"
        if kind is TypeRefKind.BUILDER:
            return f"isinstance({subject}, {self.builder_name})"
        if kind is TypeRefKind.VALUE_TYPE:
            return f"isinstance({subject}, {self.value_name})"
        return None

    # Expressions

    def expr_var(self, node) -> str:
        return self.local(node.name)

    def expr_this(self, node) -> str:
        return "self"

    def expr_self_field(self, node) -> str:
        return f"self.{self.attr(node.name)}"

    def expr_field_of(self, node) -> str:
        return f"{self.expr(node.target)}.{self.attr(node.name)}"

    def expr_getter_call(self, node) -> str:
        return f"{self.expr(node.target)}.{self.method_names.escape(node.name)}()"

    def expr_literal(self, node) -> str:
        value = node.value
        if value is None or isinstance(value, bool):
            return repr(value)
        if isinstance(value, str):
            return _str_literal(value)
        return repr(value)

    def expr_is_null(self, node) -> str:
        op = "is not" if node.negate else "is"
        return f"{self.expr(node.expr)} {op} None"

    def expr_not(self, node) -> str:
        return f"not {self.expr(node.expr)}"

    def expr_identical(self, node) -> str:
        return f"{self.expr(node.left)} is {self.expr(node.right)}"

    def expr_ternary(self, node) -> str:
        return (
            f"{self.expr(node.then)} if {self.expr(node.condition)} "
            f"else {self.expr(node.otherwise)}"
        )

    def expr_new_container(self, node) -> str:
        kind = node.category.kind
        if node.source is None:
            return {CategoryKind.SET: "set()", CategoryKind.MAP: "{}"}.get(kind, "[]")
        source = self.expr(node.source)
        factory = {CategoryKind.SET: "set", CategoryKind.MAP: "dict"}.get(kind, "list")
        return f"{factory}({source})"

    def expr_empty_container(self, node) -> str:
        kind = node.category.kind
        if kind is CategoryKind.MAP:
            return f"{RUNTIME_ALIAS}.EMPTY_MAP"
        if kind is CategoryKind.SET:
            return f"{RUNTIME_ALIAS}.EMPTY_SET"
        return f"{RUNTIME_ALIAS}.EMPTY_LIST"

    def expr_unmodifiable_view(self, node) -> str:
        kind = node.category.kind
        if kind is CategoryKind.MAP:
            return f"{RUNTIME_ALIAS}.unmodifiable_map({self.expr(node.expr)})"
        helper = "unmodifiable_set" if kind is CategoryKind.SET else "unmodifiable_list"
        inner = node.expr
        # tuple() and frozenset() copy already
        if isinstance(inner, NewContainer) and inner.source is not None:
            inner = inner.source
        return f"{RUNTIME_ALIAS}.{helper}({self.expr(inner)})"

    def expr_optional_empty(self, node) -> str:
        return f"{RUNTIME_ALIAS}.Optional.{node.wrapper.empty_name}()"

    def expr_optional_maybe(self, node) -> str:
        factory = to_snake_case(node.wrapper.maybe_name)
        return f"{RUNTIME_ALIAS}.Optional.{factory}({self.expr(node.expr)})"

    def expr_cast(self, node) -> str:
        return self.expr(node.expr)

    def expr_is_instance(self, node) -> str:
        test = self.shape_test(node.type, self.expr(node.expr))
        if test is None:
            raise GeneratorError(
                f"No runtime test for {node.type.kind.value}", self.plan.qualified_target_name
            )
        return test

    def expr_invoke(self, node) -> str:
        method = self.type_def.method(node.method, node.overload)
        args = ", ".join(self.expr(a) for a in node.args)
        if _is_varargs(method):
            args = f"*{args}"
        return f"{self.receiver(self.member)}.{self.impl_name(method)}({args})"

    def expr_iterator_of(self, node) -> str:
        return f"iter({self.expr(node.expr)})"

    def expr_varargs_as_list(self, node) -> str:
        return f"list({self.expr(node.expr)})"

    def expr_construct(self, node) -> str:
        args = ", ".join(self.expr(a) for a in node.args)
        if node.type.kind is TypeRefKind.VALUE_TYPE:
            return f"{self.value_name}({args})"
        if node.constructor is ConstructorKind.COPY_VALUE:
            return f"{self.builder_name}._copy_value({args})"
        if node.constructor is ConstructorKind.COPY_BUILDER:
            return f"{self.builder_name}._copy_builder({args})"
        return f"{self.builder_name}()"

    def expr_entry_key(self, node) -> str:
        return f"{self.expr(node.entry)}[0]"

    def expr_entry_value(self, node) -> str:
        return f"{self.expr(node.entry)}[1]"

    def expr_fields_differ(self, node) -> str:
        mine = f"self.{self.attr(node.name)}"
        theirs = f"{self.expr(node.other)}.{self.method_names.escape(node.name)}()"
        rule = node.rule
        if rule is EqualityRule.FLOAT_BITS:
            return f"{RUNTIME_ALIAS}.float_compare({theirs}, {mine}) != 0"
        if rule is EqualityRule.DOUBLE_BITS:
            return f"{RUNTIME_ALIAS}.double_compare({theirs}, {mine}) != 0"
        if rule is EqualityRule.ARRAY_DEEP:
            return f"not {RUNTIME_ALIAS}.array_equals({mine}, {theirs})"
        if rule is EqualityRule.NULL_SAFE:
            return f"not {RUNTIME_ALIAS}.structural_equals({mine}, {theirs})"
        return f"{mine} != {theirs}"

    def expr_hash_term(self, node) -> str:
        return f"{RUNTIME_ALIAS}.{HASH_HELPERS[node.rule]}(self.{self.attr(node.name)})"

    def expr_string_template(self, node) -> str:
        parts = []
        for part in node.parts:
            helper = "array_to_string" if part.rule is StringRule.ARRAY_ELEMENTS else "to_string"
            parts.append(f"{part.name}={{{RUNTIME_ALIAS}.{helper}(self.{self.attr(part.name)})}}")
        return 'f"' + node.type_name + "{{" + ", ".join(parts) + '}}"'

    # Statements

    def stmt_assign(self, node) -> List[str]:
        value = self.expr(node.value)
        if self.immutable and isinstance(node.target, SelfField):
            return [f'object.__setattr__(self, "{self.attr(node.target.name)}", {value})']
        return [f"{self.expr(node.target)} = {value}"]

    def stmt_declare_local(self, node) -> List[str]:
        return [f"{self.local(node.name)} = {self.expr(node.value)}"]

    def stmt_return(self, node) -> List[str]:
        if node.value is None:
            return ["return"]
        return [f"return {self.expr(node.value)}"]

    def stmt_if(self, node) -> List[str]:
        return [f"if {self.expr(node.condition)}:"] + self._suite(node.body)

    def stmt_throw_null_argument(self, node) -> List[str]:
        return [f"raise {RUNTIME_ALIAS}.NullArgument({_str_literal(node.message)})"]

    def stmt_for_each(self, node) -> List[str]:
        header = f"for {self.local(node.item)} in {self.expr(node.iterable)}:"
        return [header] + self._suite(node.body)

    def stmt_for_each_entry(self, node) -> List[str]:
        header = f"for {self.local(node.entry)} in {self.expr(node.mapping)}.items():"
        return [header] + self._suite(node.body)

    def stmt_while_iterator(self, node) -> List[str]:
        header = f"for {self.local(node.item)} in {self.expr(node.iterator)}:"
        return [header] + self._suite(node.body)

    def stmt_add_to(self, node) -> List[str]:
        container = node.container
        method = "append"
        if isinstance(container, SelfField):
            if self.field_category(container.name).kind is CategoryKind.SET:
                method = "add"
        return [f"{self.expr(container)}.{method}({self.expr(node.item)})"]

    def stmt_put_to(self, node) -> List[str]:
        return [f"{self.expr(node.container)}[{self.expr(node.key)}] = {self.expr(node.value)}"]

    def stmt_expr_stmt(self, node) -> List[str]:
        return [self.expr(node.expr)]

    def stmt_init_hash(self, node) -> List[str]:
        return [f"{self.local(node.name)} = 1"]

    def stmt_hash_accumulate(self, node) -> List[str]:
        name = self.local(node.name)
        return [f"{name} = {RUNTIME_ALIAS}.accumulate({name}, {self.expr(node.term)})"]

    def _suite(self, body) -> List[str]:
        return self.indented(self.block(body) or ["pass"])

    # Members

    def params(self, member) -> List[str]:
        params = [self.receiver(member)]
        for param in member.params:
            name = self.local(param.name)
            params.append(f"*{name}" if param.type.kind is TypeRefKind.VARARGS else name)
        return params

    def render_method(self, type_def: TypeDefinition, method: MethodSpec) -> List[str]:
        self.enter(type_def, method)
        lines = ["@classmethod"] if method.static else []
        lines.append(f"def {self.impl_name(method)}({', '.join(self.params(method))}):")
        lines.extend(self._suite(method.body))
        return lines

    def render_dispatcher(self, type_def: TypeDefinition, methods: List[MethodSpec]) -> List[str]:
        """Public entry point choosing among the overloads of one name."""
        self.enter(type_def, methods[0])
        public = self.public_name(methods[0])
        receiver = self.receiver(methods[0])

        varargs = next((m for m in methods if _is_varargs(m)), None)
        by_arity = {}
        for method in methods:
            if method is not varargs:
                by_arity.setdefault(len(method.params), []).append(method)

        body = []
        for arity in sorted(by_arity):
            body.append(f"if len(args) == {arity}:")
            body.extend(self.indented(self._dispatch_branch(receiver, arity, by_arity[arity])))
        if varargs is not None:
            body.append(f"return {receiver}.{self.impl_name(varargs)}(*args)")
        else:
            body.append(f"raise {RUNTIME_ALIAS}.no_overload({_str_literal(public)}, args)")

        lines = ["@classmethod"] if methods[0].static else []
        lines.append(f"def {public}({receiver}, *args):")
        lines.extend(self.indented(body))
        return lines

    def _dispatch_branch(self, receiver: str, arity: int, candidates: List[MethodSpec]) -> List[str]:
        first = candidates[0]
        if len(candidates) == 1 or arity != 1:
            return [f"return {receiver}.{self.impl_name(first)}(*args)"]

        lines = [
            "if args[0] is None:",
            f"{self.indent}return {receiver}.{self.impl_name(first)}(None)",
        ]
        ranked = sorted(
            candidates, key=lambda m: SHAPE_RANKS.get(m.params[0].type.kind, UNTYPED_RANK)
        )
        for method in ranked:
            call = f"return {receiver}.{self.impl_name(method)}(args[0])"
            test = self.shape_test(method.params[0].type, "args[0]")
            if test is None:
                lines.append(call)
                break
            lines.append(f"if {test}:")
            lines.append(f"{self.indent}{call}")
        return lines

    def render_methods(self, type_def: TypeDefinition) -> List[List[str]]:
        blocks = []
        for methods in self.method_groups(type_def).values():
            for method in methods:
                blocks.append(self.render_method(type_def, method))
            if len(methods) > 1:
                blocks.append(self.render_dispatcher(type_def, methods))
        return blocks

    def storage_default(self, category: FieldCategory) -> str:
        if category.is_scalar:
            return SCALAR_DEFAULTS[category.scalar_kind]
        return "None"

    def render_builder_init(self, type_def: TypeDefinition) -> List[str]:
        ctor = type_def.constructor(ConstructorKind.DEFAULT)
        self.enter(type_def, ctor)
        body = [
            f"self.{self.attr(f.name)} = {self.storage_default(f.category)}"
            for f in type_def.fields
        ]
        body.extend(self.block(ctor.body))
        return ["def __init__(self):"] + self.indented(body or ["pass"])

    def render_copy_constructor(self, type_def: TypeDefinition, ctor: ConstructorSpec) -> List[str]:
        self.enter(type_def, ctor)
        name = "_copy_value" if ctor.kind is ConstructorKind.COPY_VALUE else "_copy_builder"
        params = ", ".join(["cls"] + [self.local(p.name) for p in ctor.params])
        body = ["self = cls.__new__(cls)"] + self.block(ctor.body) + ["return self"]
        return ["@classmethod", f"def {name}({params}):"] + self.indented(body)

    def render_value_init(self, type_def: TypeDefinition) -> List[str]:
        ctor = type_def.constructor(ConstructorKind.VALUE)
        self.enter(type_def, ctor)
        self.immutable = True
        try:
            body = self.block(ctor.body)
        finally:
            self.immutable = False
        params = ", ".join(["self"] + [self.local(p.name) for p in ctor.params])
        return [f"def __init__({params}):"] + self.indented(body or ["pass"])

    def slots(self, type_def: TypeDefinition) -> str:
        names = [f'"{self.attr(f.name)}"' for f in type_def.fields]
        if len(names) == 1:
            return f"({names[0]},)"
        return f"({', '.join(names)})"

    def contract_methods(self) -> List[str]:
        """Names of the abstract accessors of the contract class."""
        names = [self.method_names.escape(f.name) for f in self.plan.value.fields]
        if self.plan.metadata.get("supports_to_builder"):
            names.append(self.method_names.escape("builder"))
        return names

