"""
Builder-type planning.

The builder mirrors the schema with mutable storage and offers, per field, a
getter plus the mutators of the field's category:

- scalar, reference, array: one setter
- optional: a raw setter that wraps, and a setter taking the wrapper
- collection, set: replace from same-typed, collection, iterable, iterator
  and varargs, plus ``add<Singular>``
- map: replace from map, 1..5 explicit key/value pairs, plus ``put<Singular>``

Replace-style mutators share one validation path: the more general forms
delegate to the more specific ones.
"""

from typing import Callable, Dict, List, Optional

from ...logging_config import get_logger
from .naming import capitalize_first, singular_name, unique_variable
from .nullness import enforce_non_null
from .plan import (
    BUILDER,
    TARGET,
    VALUE_TYPE,
    AddTo,
    Assign,
    Cast,
    Construct,
    ConstructorKind,
    ConstructorSpec,
    DeclareLocal,
    EmptyContainer,
    EntryKey,
    EntryValue,
    ExprStmt,
    FieldDecl,
    FieldOf,
    ForEach,
    ForEachEntry,
    GetterCall,
    If,
    Invoke,
    IsInstance,
    IsNull,
    IteratorOf,
    Literal,
    MethodRole,
    MethodSpec,
    NewContainer,
    OptionalEmpty,
    OptionalMaybe,
    Param,
    PutTo,
    Return,
    SelfField,
    Ternary,
    This,
    ThrowNullArgument,
    TypeDefinition,
    TypeRefKind,
    TypeRole,
    UnmodifiableView,
    Var,
    VarargsAsList,
    WhileIterator,
    null_check,
    ref,
)
from .resolver import TypeResolver
from .schema import CategoryKind, FieldSchema, TypeSchema, Visibility

logger = get_logger(__name__)

MAX_MAP_ENTRIES = 5


class _FieldPlanner:
    """Plans the getter and mutators for one field."""

    def __init__(self, field: FieldSchema, builtin_type_name: Callable[[str], bool]):
        self.field = field
        self.name = field.name
        self.category = field.category
        self.enforced = enforce_non_null(field)
        self.builtin_type_name = builtin_type_name

    # Helpers

    def _type(self, kind: TypeRefKind):
        return ref(kind, self.category)

    def _method(self, name, overload, role, params, body, returns=BUILDER) -> MethodSpec:
        return MethodSpec(
            name=name,
            overload=overload,
            role=role,
            params=tuple(params),
            returns=returns,
            body=tuple(body),
            field=self.name,
        )

    def _storage(self):
        return SelfField(self.name)

    def _lazy_instantiation(self) -> If:
        return If(
            IsNull(self._storage()),
            (Assign(self._storage(), NewContainer(self.category)),),
        )

    def _null_guard(self) -> If:
        """Reject an absent argument, or clear the field when not enforced."""
        if self.enforced:
            return If(IsNull(Var(self.name)), (ThrowNullArgument(self.name),))
        return If(
            IsNull(Var(self.name)),
            (Assign(self._storage(), Literal(None)), Return(This())),
        )

    # Getter

    def getter(self) -> MethodSpec:
        body = []
        if self.category.is_container and self.enforced:
            body.append(self._lazy_instantiation())
        body.append(Return(self._storage()))
        return self._method(
            self.name, "get", MethodRole.GETTER, (), body,
            returns=self._type(TypeRefKind.FIELD),
        )

    # Scalar, reference, array

    def plain_mutators(self) -> List[MethodSpec]:
        body = []
        if self.enforced:
            body.append(null_check(Var(self.name), self.name))
        body.append(Assign(self._storage(), Var(self.name)))
        body.append(Return(This()))
        param = Param(self.name, self._type(TypeRefKind.FIELD))
        return [self._method(self.name, "set", MethodRole.SETTER, (param,), body)]

    # Optional

    def optional_mutators(self) -> List[MethodSpec]:
        wrapper = self.category.wrapper
        raw = self._method(
            self.name,
            "raw",
            MethodRole.OPTIONAL_RAW_SETTER,
            (Param(self.name, self._type(TypeRefKind.ELEMENT)),),
            (Return(Invoke(self.name, "optional", (OptionalMaybe(wrapper, Var(self.name)),))),),
        )

        body = []
        if self.enforced:
            body.append(null_check(Var(self.name), self.name))
        body.append(
            Assign(self._storage(), Cast(self._type(TypeRefKind.FIELD), Var(self.name)))
        )
        body.append(Return(This()))
        wrapped = self._method(
            self.name,
            "optional",
            MethodRole.OPTIONAL_SETTER,
            (Param(self.name, self._type(TypeRefKind.OPTIONAL)),),
            body,
        )
        return [raw, wrapped]

    # Collection and set

    def collection_mutators(self) -> List[MethodSpec]:
        name = self.name
        item = unique_variable("item", [name])
        collection_type = self._type(TypeRefKind.COLLECTION)

        same = self._method(
            name, "same", MethodRole.REPLACE,
            (Param(name, self._type(TypeRefKind.SAME)),),
            (Return(Invoke(name, "collection", (Cast(collection_type, Var(name)),))),),
        )

        body = [self._null_guard()]
        if self.enforced:
            body.append(
                ForEach(
                    item,
                    self._type(TypeRefKind.ELEMENT),
                    Var(name),
                    (null_check(Var(item), f"{name}: null item"),),
                )
            )
        body.append(Assign(self._storage(), NewContainer(self.category, Var(name))))
        body.append(Return(This()))
        from_collection = self._method(
            name, "collection", MethodRole.REPLACE, (Param(name, collection_type),), body
        )

        from_iterable = self._method(
            name, "iterable", MethodRole.REPLACE,
            (Param(name, self._type(TypeRefKind.ITERABLE)),),
            (
                self._null_guard(),
                If(
                    IsInstance(collection_type, Var(name)),
                    (Return(Invoke(name, "collection", (Cast(collection_type, Var(name)),))),),
                ),
                Return(Invoke(name, "iterator", (IteratorOf(Var(name)),))),
            ),
        )

        loop_body = []
        if self.enforced:
            loop_body.append(null_check(Var(item), f"{name}: null item"))
        loop_body.append(AddTo(self._storage(), Var(item)))
        from_iterator = self._method(
            name, "iterator", MethodRole.REPLACE,
            (Param(name, self._type(TypeRefKind.ITERATOR)),),
            (
                self._null_guard(),
                Assign(self._storage(), NewContainer(self.category)),
                WhileIterator(Var(name), item, self._type(TypeRefKind.ELEMENT), tuple(loop_body)),
                Return(This()),
            ),
        )

        from_varargs = self._method(
            name, "varargs", MethodRole.REPLACE,
            (Param(name, self._type(TypeRefKind.VARARGS)),),
            (
                self._null_guard(),
                Return(
                    Invoke(
                        name,
                        "iterable",
                        (Cast(self._type(TypeRefKind.ITERABLE), VarargsAsList(Var(name))),),
                    )
                ),
            ),
        )

        methods = [same, from_collection, from_iterable, from_iterator, from_varargs]
        adder = self._add_item()
        if adder is not None:
            methods.append(adder)
        return methods

    def _add_item(self) -> Optional[MethodSpec]:
        singular = singular_name(self.name, self.builtin_type_name)
        if singular is None:
            return None
        body = []
        if self.enforced:
            body.append(null_check(Var(singular), singular))
        body.append(self._lazy_instantiation())
        body.append(AddTo(self._storage(), Var(singular)))
        body.append(Return(This()))
        return self._method(
            "add" + capitalize_first(singular),
            "item",
            MethodRole.ADD_ITEM,
            (Param(singular, self._type(TypeRefKind.ELEMENT)),),
            body,
        )

    # Map

    def map_mutators(self) -> List[MethodSpec]:
        methods = [self._put_all()]
        for arity in range(1, MAX_MAP_ENTRIES + 1):
            methods.append(self._put_entries(arity))
        putter = self._put_item()
        if putter is not None:
            methods.append(putter)
        return methods

    def _put_all(self) -> MethodSpec:
        name = self.name
        entry = unique_variable("entry", [name])
        body = []
        if self.enforced:
            body.append(null_check(Var(name), name))
            body.append(
                ForEachEntry(
                    entry,
                    self._type(TypeRefKind.ENTRY),
                    Var(name),
                    (
                        null_check(EntryKey(Var(entry)), f"{name}: null key"),
                        null_check(EntryValue(Var(entry)), f"{name}: null value"),
                    ),
                )
            )
        else:
            body.append(
                If(IsNull(Var(name)), (Assign(self._storage(), Literal(None)), Return(This())))
            )
        body.append(Assign(self._storage(), NewContainer(self.category, Var(name))))
        body.append(Return(This()))
        return self._method(
            name, "map", MethodRole.REPLACE,
            (Param(name, self._type(TypeRefKind.MAP)),), body,
        )

    def _put_entries(self, arity: int) -> MethodSpec:
        """Arity ``n`` delegates to arity ``n - 1`` and then puts one more pair."""
        name = self.name
        params = []
        for i in range(1, arity + 1):
            params.append(Param(f"k{i}", self._type(TypeRefKind.KEY)))
            params.append(Param(f"v{i}", self._type(TypeRefKind.VALUE)))

        key, value = Var(f"k{arity}"), Var(f"v{arity}")
        body = []
        if arity > 1:
            previous = tuple(Var(p.name) for p in params[:-2])
            body.append(ExprStmt(Invoke(name, f"entries{arity - 1}", previous)))
        if self.enforced:
            body.append(null_check(key, f"{name}: k{arity}"))
            body.append(null_check(value, f"{name}: v{arity}"))
        if arity == 1:
            body.append(Assign(self._storage(), NewContainer(self.category)))
        body.append(PutTo(self._storage(), key, value))
        body.append(Return(This()))
        return self._method(name, f"entries{arity}", MethodRole.PUT_ENTRIES, params, body)

    def _put_item(self) -> Optional[MethodSpec]:
        singular = singular_name(self.name, self.builtin_type_name)
        if singular is None:
            return None
        body = []
        if self.enforced:
            body.append(null_check(Var("key"), f"{singular}: key"))
            body.append(null_check(Var("value"), f"{singular}: value"))
        body.append(self._lazy_instantiation())
        body.append(PutTo(self._storage(), Var("key"), Var("value")))
        body.append(Return(This()))
        return self._method(
            "put" + capitalize_first(singular),
            "item",
            MethodRole.PUT_ITEM,
            (
                Param("key", self._type(TypeRefKind.KEY)),
                Param("value", self._type(TypeRefKind.VALUE)),
            ),
            body,
        )

    def mutators(self) -> List[MethodSpec]:
        return MUTATORS_BY_CATEGORY[self.category.kind](self)


MUTATORS_BY_CATEGORY: Dict[CategoryKind, Callable[[_FieldPlanner], List[MethodSpec]]] = {
    CategoryKind.SCALAR: _FieldPlanner.plain_mutators,
    CategoryKind.REFERENCE: _FieldPlanner.plain_mutators,
    CategoryKind.ARRAY: _FieldPlanner.plain_mutators,
    CategoryKind.OPTIONAL: _FieldPlanner.optional_mutators,
    CategoryKind.COLLECTION: _FieldPlanner.collection_mutators,
    CategoryKind.SET: _FieldPlanner.collection_mutators,
    CategoryKind.MAP: _FieldPlanner.map_mutators,
}


def _container_copy(field: FieldSchema, source) -> Ternary:
    return Ternary(IsNull(source), Literal(None), NewContainer(field.category, source))


def _default_constructor(fields: List[FieldSchema]) -> ConstructorSpec:
    body = []
    for field in fields:
        if field.kind is CategoryKind.OPTIONAL and enforce_non_null(field):
            body.append(Assign(SelfField(field.name), OptionalEmpty(field.category.wrapper)))
    return ConstructorSpec(ConstructorKind.DEFAULT, (), tuple(body), public=True)


def _copy_value_constructor(fields: List[FieldSchema]) -> ConstructorSpec:
    source = Var("v")
    body = []
    for field in fields:
        getter = GetterCall(source, field.name)
        if field.category.is_container:
            local = "_" + field.name
            body.append(DeclareLocal(local, ref(TypeRefKind.FIELD, field.category), getter))
            body.append(Assign(SelfField(field.name), _container_copy(field, Var(local))))
        else:
            body.append(Assign(SelfField(field.name), getter))
    return ConstructorSpec(ConstructorKind.COPY_VALUE, (Param("v", TARGET),), tuple(body))


def _copy_builder_constructor(fields: List[FieldSchema]) -> ConstructorSpec:
    source = Var("v")
    body = []
    for field in fields:
        other = FieldOf(source, field.name)
        if field.category.is_container:
            body.append(Assign(SelfField(field.name), _container_copy(field, other)))
        else:
            body.append(Assign(SelfField(field.name), other))
    return ConstructorSpec(ConstructorKind.COPY_BUILDER, (Param("v", BUILDER),), tuple(body))


def _build(fields: List[FieldSchema]) -> MethodSpec:
    args = []
    for field in fields:
        storage = SelfField(field.name)
        if field.category.is_container:
            absent = EmptyContainer(field.category) if enforce_non_null(field) else Literal(None)
            args.append(
                Ternary(
                    IsNull(storage, negate=True),
                    UnmodifiableView(field.category, NewContainer(field.category, storage)),
                    absent,
                )
            )
        else:
            args.append(storage)
    return MethodSpec(
        name="build",
        overload="build",
        role=MethodRole.BUILD,
        params=(),
        returns=TARGET,
        body=(Return(Construct(VALUE_TYPE, ConstructorKind.VALUE, tuple(args))),),
    )


def _factories() -> List[MethodSpec]:
    return [
        MethodSpec(
            name="from",
            overload="value",
            role=MethodRole.FROM_VALUE,
            params=(Param("v", TARGET),),
            returns=BUILDER,
            body=(Return(Construct(BUILDER, ConstructorKind.COPY_VALUE, (Var("v"),))),),
            static=True,
        ),
        MethodSpec(
            name="from",
            overload="builder",
            role=MethodRole.FROM_BUILDER,
            params=(Param("v", BUILDER),),
            returns=BUILDER,
            body=(Return(Construct(BUILDER, ConstructorKind.COPY_BUILDER, (Var("v"),))),),
            static=True,
        ),
    ]


def _to_builder() -> MethodSpec:
    return MethodSpec(
        name="builder",
        overload="builder",
        role=MethodRole.TO_BUILDER,
        params=(),
        returns=BUILDER,
        body=(Return(Construct(BUILDER, ConstructorKind.COPY_BUILDER, (This(),))),),
    )


def build_builder_type(
    schema: TypeSchema, resolver: Optional[TypeResolver] = None
) -> TypeDefinition:
    """
    Plan the mutable builder type for ``schema``.

    Args:
        schema: Validated target schema
        resolver: Used for the built-in type check of singular names

    Returns:
        Builder type definition
    """
    resolver = resolver or TypeResolver()
    fields = list(schema.fields)

    methods: List[MethodSpec] = []
    for field in fields:
        planner = _FieldPlanner(field, resolver.is_builtin_type_name)
        methods.append(planner.getter())
        methods.extend(planner.mutators())

    methods.append(_build(fields))
    methods.extend(_factories())
    if schema.supports_to_builder:
        methods.append(_to_builder())

    constructors = (
        _default_constructor(fields),
        _copy_value_constructor(fields),
        _copy_builder_constructor(fields),
    )

    logger.debug(
        f"Planned builder {schema.generated_builder_name} with {len(methods)} method(s)"
    )
    return TypeDefinition(
        name=schema.generated_builder_name,
        role=TypeRole.BUILDER,
        fields=tuple(FieldDecl(f.name, f.category) for f in fields),
        constructors=constructors,
        methods=tuple(methods),
        public=schema.visibility is Visibility.PUBLIC,
    )
