"""Runtime support for generated Python value types and builders.

Generated modules import this as ``_rt``. It provides the null-argument
error, an optional wrapper, immutable container factories, the shape
predicates used by overload dispatchers, and hashing, equality and string
helpers whose results match the JVM conventions (32-bit wrap-around hashes,
``1231``/``1237`` booleans, bit-pattern float comparison, ``[a, b]`` and
``{k=v}`` rendering).
"""

import math
import struct
from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from collections.abc import Set as AbstractSet
from types import MappingProxyType
from typing import Any

_TEXT_TYPES = (str, bytes, bytearray)


class NullArgument(TypeError):
    """An absent value was passed for a field that requires one."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


def no_overload(method: str, args: tuple) -> TypeError:
    """Build the error raised when no overload accepts ``args``."""
    kinds = ", ".join(type(a).__name__ for a in args) or "no arguments"
    return TypeError(f"{method}() has no overload accepting ({kinds})")


# ---------------------------------------------------------------------------
# Optional wrapper
# ---------------------------------------------------------------------------


class Optional:
    """Immutable container that holds a value or nothing."""

    __slots__ = ("_value",)

    _EMPTY: "Optional | None" = None

    def __init__(self, value: Any):
        if value is None:
            raise NullArgument("value")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name, value):
        raise AttributeError("Optional is immutable")

    @classmethod
    def empty(cls) -> "Optional":
        if cls._EMPTY is None:
            empty = object.__new__(cls)
            object.__setattr__(empty, "_value", None)
            cls._EMPTY = empty
        return cls._EMPTY

    absent = empty

    @classmethod
    def of(cls, value: Any) -> "Optional":
        return cls(value)

    @classmethod
    def of_nullable(cls, value: Any) -> "Optional":
        return cls.empty() if value is None else cls(value)

    from_nullable = of_nullable

    def is_present(self) -> bool:
        return self._value is not None

    def get(self) -> Any:
        if self._value is None:
            raise ValueError("No value present")
        return self._value

    def or_else(self, other: Any) -> Any:
        return other if self._value is None else self._value

    def __eq__(self, other):
        if not isinstance(other, Optional):
            return NotImplemented
        return structural_equals(self._value, other._value)

    def __hash__(self):
        return structural_hash(self._value)

    def __str__(self):
        if self._value is None:
            return "Optional.empty"
        return f"Optional[{to_string(self._value)}]"

    __repr__ = __str__


# ---------------------------------------------------------------------------
# Containers and shapes
# ---------------------------------------------------------------------------

EMPTY_LIST: tuple = ()
EMPTY_SET: frozenset = frozenset()
EMPTY_MAP = MappingProxyType({})


def unmodifiable_list(items) -> tuple:
    return tuple(items)


def unmodifiable_set(items) -> frozenset:
    return frozenset(items)


def unmodifiable_map(mapping) -> MappingProxyType:
    return MappingProxyType(mapping)


def is_sequence(value) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def is_set_like(value) -> bool:
    return isinstance(value, AbstractSet)


def is_mapping(value) -> bool:
    return isinstance(value, Mapping)


def is_collection(value) -> bool:
    return (
        isinstance(value, Collection)
        and not isinstance(value, _TEXT_TYPES)
        and not isinstance(value, Mapping)
    )


def is_iterator(value) -> bool:
    return isinstance(value, Iterator)


def is_iterable(value) -> bool:
    return (
        isinstance(value, Iterable)
        and not isinstance(value, _TEXT_TYPES)
        and not isinstance(value, Mapping)
    )


# ---------------------------------------------------------------------------
# Integer arithmetic and bit patterns
# ---------------------------------------------------------------------------


def int32(value: int) -> int:
    """Wrap to a signed 32-bit integer."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def int64(value: int) -> int:
    """Wrap to a signed 64-bit integer."""
    value &= 0xFFFFFFFFFFFFFFFF
    return value - 0x10000000000000000 if value & 0x8000000000000000 else value


def _to_float32(value: float) -> float:
    try:
        return struct.unpack(">f", struct.pack(">f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def float_to_int_bits(value: float) -> int:
    """Bit pattern of a 32-bit float, NaN canonicalized."""
    if math.isnan(value):
        return 0x7FC00000
    return int32(struct.unpack(">I", struct.pack(">f", _to_float32(value)))[0])


def double_to_long_bits(value: float) -> int:
    """Bit pattern of a 64-bit float, NaN canonicalized."""
    if math.isnan(value):
        return 0x7FF8000000000000
    return int64(struct.unpack(">Q", struct.pack(">d", value))[0])


def _fold(bits: int) -> int:
    unsigned = bits & 0xFFFFFFFFFFFFFFFF
    return int32(unsigned ^ (unsigned >> 32))


# ---------------------------------------------------------------------------
# Hashing
# ---------------------------------------------------------------------------


def accumulate(result: int, term: int) -> int:
    """One step of ``result = 31 * result + term``."""
    return int32(31 * result + term)


def hash_boolean(value: bool) -> int:
    return 1231 if value else 1237


def hash_widen(value) -> int:
    """byte, short and char widen to int; chars are one-character strings."""
    if isinstance(value, str):
        return ord(value)
    return int32(value)


def hash_int(value: int) -> int:
    return int32(value)


def hash_long(value: int) -> int:
    return _fold(int64(value))


def hash_float(value: float) -> int:
    return float_to_int_bits(value) if value != 0.0 else 0


def hash_double(value: float) -> int:
    return _fold(double_to_long_bits(value))


def _string_hash(value: str) -> int:
    encoded = value.encode("utf-16-be", "surrogatepass")
    result = 0
    for i in range(0, len(encoded), 2):
        result = int32(31 * result + ((encoded[i] << 8) | encoded[i + 1]))
    return result


def structural_hash(value: Any) -> int:
    """Hash ``value`` the way its JVM counterpart would, 0 for None."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return hash_boolean(value)
    if isinstance(value, int):
        if -0x80000000 <= value <= 0x7FFFFFFF:
            return value
        return hash_long(value)
    if isinstance(value, float):
        return hash_double(value)
    if isinstance(value, str):
        return _string_hash(value)
    if isinstance(value, (bytes, bytearray)):
        return array_hash([b - 256 if b > 127 else b for b in value])
    if isinstance(value, Mapping):
        total = 0
        for key, item in value.items():
            total += structural_hash(key) ^ structural_hash(item)
        return int32(total)
    if isinstance(value, AbstractSet):
        return int32(sum(structural_hash(item) for item in value))
    if isinstance(value, Sequence):
        return array_hash(value)
    return int32(type(value).__hash__(value))


def array_hash(values) -> int:
    if values is None:
        return 0
    result = 1
    for item in values:
        result = accumulate(result, structural_hash(item))
    return result


# ---------------------------------------------------------------------------
# Equality
# ---------------------------------------------------------------------------


def _compare_bits(left: int, right: int) -> int:
    if left == right:
        return 0
    return -1 if left < right else 1


def float_compare(left: float, right: float) -> int:
    """Total order over 32-bit floats: -0.0 < 0.0 and NaN equals NaN."""
    left, right = _to_float32(left), _to_float32(right)
    if left < right:
        return -1
    if left > right:
        return 1
    return _compare_bits(float_to_int_bits(left), float_to_int_bits(right))


def double_compare(left: float, right: float) -> int:
    """Total order over 64-bit floats: -0.0 < 0.0 and NaN equals NaN."""
    if left < right:
        return -1
    if left > right:
        return 1
    return _compare_bits(double_to_long_bits(left), double_to_long_bits(right))


_MISSING = object()


def _number_kind(value):
    if isinstance(value, bool):
        return bool
    if isinstance(value, int):
        return int
    if isinstance(value, float):
        return float
    return None


def structural_equals(left: Any, right: Any) -> bool:
    """
    Equality consistent with :func:`structural_hash`.

    Booleans, integers and floats never equal one another, floats compare by
    bit pattern, and mappings, sets and sequences compare element-wise with
    the same rules.
    """
    if left is right:
        return True
    if left is None or right is None:
        return False

    kind = _number_kind(left)
    if kind is not None or _number_kind(right) is not None:
        if kind is not _number_kind(right):
            return False
        if kind is float:
            return double_to_long_bits(left) == double_to_long_bits(right)
        return left == right

    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right

    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if len(left) != len(right):
            return False
        stored = {key: key for key in right}
        for key, item in left.items():
            match = stored.get(key, _MISSING)
            if match is _MISSING or not structural_equals(key, match):
                return False
            if not structural_equals(item, right[match]):
                return False
        return True

    if isinstance(left, AbstractSet) or isinstance(right, AbstractSet):
        if not (isinstance(left, AbstractSet) and isinstance(right, AbstractSet)):
            return False
        if len(left) != len(right):
            return False
        stored = {item: item for item in right}
        for item in left:
            match = stored.get(item, _MISSING)
            if match is _MISSING or not structural_equals(item, match):
                return False
        return True

    if isinstance(left, Sequence) or isinstance(right, Sequence):
        if not (isinstance(left, Sequence) and isinstance(right, Sequence)):
            return False
        return len(left) == len(right) and all(
            structural_equals(a, b) for a, b in zip(left, right)
        )

    return left == right


def array_equals(left, right) -> bool:
    """Element-wise :func:`structural_equals`, None only equal to None."""
    if left is right:
        return True
    if left is None or right is None or len(left) != len(right):
        return False
    return all(structural_equals(a, b) for a, b in zip(left, right))


# ---------------------------------------------------------------------------
# String rendering
# ---------------------------------------------------------------------------


def to_string(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        inner = ", ".join(f"{to_string(k)}={to_string(v)}" for k, v in value.items())
        return "{" + inner + "}"
    if isinstance(value, (AbstractSet, Sequence)) and not isinstance(value, _TEXT_TYPES):
        return array_to_string(value)
    return str(value)


def array_to_string(values) -> str:
    if values is None:
        return "null"
    return "[" + ", ".join(to_string(item) for item in values) + "]"
