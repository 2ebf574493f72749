"""
Defines the runtime value types for the DynVar container.

Python has a single arbitrary-precision ``int`` and a single double-precision
``float``. The container needs the fixed-width numeric types a persisted
value can declare, so this module provides small value classes for them,
the tagging function that names a value's runtime type, and the coercion
table every typed read and arithmetic operation goes through.
"""

import math
import struct
from typing import Any, Optional


class DynVarError(Exception):
    """Base class for errors raised by the DynVar container."""
    pass


class IncompatibleOperandType(DynVarError, TypeError):
    """Raised when a value cannot be cast to the type an operation requires."""
    def __init__(self, value: Any, kind: str):
        super().__init__(f"cannot treat {value!r} ({type(value).__name__}) as {kind}")
        self.value = value
        self.kind = kind


# =================================================================
# Fixed-width numeric types
# =================================================================

INT_MIN, INT_MAX = -(1 << 31), (1 << 31) - 1
LONG_MIN, LONG_MAX = -(1 << 63), (1 << 63) - 1


def _wrap(value: int, bits: int) -> int:
    """Two's-complement wrap of an exact integer to ``bits`` bits."""
    mask = (1 << bits) - 1
    value &= mask
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def _float_to_integral(value: float, bits: int) -> int:
    """Narrowing conversion of a floating value: NaN is 0, out of range saturates."""
    if math.isnan(value):
        return 0
    lo, hi = (INT_MIN, INT_MAX) if bits <= 32 else (LONG_MIN, LONG_MAX)
    if math.isinf(value):
        return hi if value > 0 else lo
    return max(lo, min(hi, int(value)))


def to_f32(value: float) -> float:
    try:
        return struct.unpack('<f', struct.pack('<f', value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class _FixedInt(int):
    """Base for the fixed-width integer types; construction wraps like a narrowing cast."""
    bits = 64
    kind = 'i64'

    def __new__(cls, value: Any = 0):
        if isinstance(value, float):
            # byte and short narrow through int, the same as a (byte)(int) cast
            value = _float_to_integral(value, max(cls.bits, 32))
        else:
            value = int(value)
        return super().__new__(cls, _wrap(value, cls.bits))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"


class Byte(_FixedInt):
    """A signed 8-bit integer."""
    bits = 8
    kind = 'i8'


class Short(_FixedInt):
    """A signed 16-bit integer."""
    bits = 16
    kind = 'i16'


class Int(_FixedInt):
    """A signed 32-bit integer."""
    bits = 32
    kind = 'i32'


class Long(_FixedInt):
    """A signed 64-bit integer."""
    bits = 64
    kind = 'i64'


class Float(float):
    """A single-precision float; construction rounds to the nearest 32-bit value."""
    kind = 'f32'

    def __new__(cls, value: Any = 0.0):
        return super().__new__(cls, to_f32(float(value)))

    def __repr__(self) -> str:
        return f"Float({float(self)!r})"


class Double(float):
    """A double-precision float."""
    kind = 'f64'

    def __repr__(self) -> str:
        return f"Double({float(self)!r})"


# =================================================================
# Tags, coercion and promotion
# =================================================================

INTEGRAL_KINDS = ('i8', 'i16', 'i32', 'i64')
FLOATING_KINDS = ('f32', 'f64')
NUMERIC_KINDS = INTEGRAL_KINDS + FLOATING_KINDS

CONSTRUCTORS = {
    'i8': Byte,
    'i16': Short,
    'i32': Int,
    'i64': Long,
    'f32': Float,
    'f64': Double,
}


def kind_of(value: Any) -> Optional[str]:
    """Returns the runtime tag of a value, or None for a null value."""
    match value:
        case None:
            return None
        case bool():
            return 'bool'
        case _FixedInt() | Float() | Double():
            return value.kind
        case int():
            return 'i32' if INT_MIN <= value <= INT_MAX else 'i64'
        case float():
            return 'f64'
        case str():
            return 'str'
        case _:
            return 'object'


def is_numeric(value: Any) -> bool:
    return kind_of(value) in NUMERIC_KINDS


def cast_to(value: Any, kind: str) -> Any:
    """
    Casts a value to the numeric type named by ``kind``.

    Numeric sources always convert (narrowing where needed). Any other
    numeric-like object is cast blindly; strings, booleans, None and
    objects without an int/float conversion raise IncompatibleOperandType.
    """
    ctor = CONSTRUCTORS[kind]
    if type(value) is ctor:
        return value
    if isinstance(value, (bool, str, bytes, bytearray)) or value is None:
        raise IncompatibleOperandType(value, kind)
    try:
        return ctor(value)
    except (TypeError, ValueError) as e:
        raise IncompatibleOperandType(value, kind) from e


def promote(left: str, right: str) -> str:
    """Binary numeric promotion of two numeric tags."""
    if 'f64' in (left, right):
        return 'f64'
    if 'f32' in (left, right):
        return 'f32'
    if 'i64' in (left, right):
        return 'i64'
    return 'i32'


def _trunc_div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def _float_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        sign = math.copysign(1.0, a) * math.copysign(1.0, b)
        return math.copysign(math.inf, sign)
    return a / b


_INTEGRAL_OPS = {
    'add': lambda a, b: a + b,
    'subtract': lambda a, b: a - b,
    'multiply': lambda a, b: a * b,
    'divide': _trunc_div,
}

_FLOATING_OPS = {
    'add': lambda a, b: a + b,
    'subtract': lambda a, b: a - b,
    'multiply': lambda a, b: a * b,
    'divide': _float_div,
}


def arithmetic(op: str, left: Any, right: Any) -> Any:
    """
    Applies ``op`` to two values and returns a result of the left operand's type.

    ``left`` must be numeric. ``right`` is matched by its own tag; a
    non-numeric right operand is cast to the left operand's type, which
    raises IncompatibleOperandType when it cannot be. The operation is
    computed in the promoted type and the result narrowed back to the left
    type. Integral division by zero raises ZeroDivisionError.
    """
    left_kind = kind_of(left)
    right_kind = kind_of(right)
    if right_kind not in NUMERIC_KINDS:
        right = cast_to(right, left_kind)
        right_kind = left_kind
    wide = promote(left_kind, right_kind)
    if wide in INTEGRAL_KINDS:
        result = CONSTRUCTORS[wide](_INTEGRAL_OPS[op](int(left), int(right)))
    elif wide == 'f32':
        result = Float(_FLOATING_OPS[op](float(Float(left)), float(Float(right))))
    else:
        result = Double(_FLOATING_OPS[op](float(left), float(right)))
    return cast_to(result, left_kind)


__all__ = [
    "DynVarError",
    "IncompatibleOperandType",
    "Byte", "Short", "Int", "Long", "Float", "Double",
    "INT_MIN", "INT_MAX", "LONG_MIN", "LONG_MAX",
    "INTEGRAL_KINDS", "FLOATING_KINDS", "NUMERIC_KINDS", "CONSTRUCTORS",
    "to_f32", "kind_of", "is_numeric", "cast_to", "promote", "arithmetic",
]
