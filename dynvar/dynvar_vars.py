"""
Typed DynVarField variants.

Each variant pins a runtime type and coerces the stored value to it on
every read. A slot promoted from another type keeps whatever value it
carried over, so the stored value may still be, say, an ``Int`` inside a
``DynVarLong`` until the next write.
"""
import time
from typing import Any, Optional, Union

from dynvar.dynvar_datatypes import (
    IncompatibleOperandType, NUMERIC_KINDS, kind_of, cast_to,
)
from dynvar.dynvar_field import DynVarField
from dynvar.dynvar_printer import pformat


class TypedField(DynVarField):
    """Base for variants pinned to one of the numeric tags."""
    kind = 'object'

    def _read(self) -> Any:
        value = self.value
        if value is None:
            return None
        return cast_to(value, self.kind)

    def _left_operand(self) -> Any:
        value = self.value
        if kind_of(value) in NUMERIC_KINDS:
            return cast_to(value, self.kind)
        return value


class DynVarByte(TypedField):
    type_name = "byte"
    kind = 'i8'

    def get_byte(self) -> int:
        return self.get()


class DynVarShort(TypedField):
    type_name = "short"
    kind = 'i16'

    def get_short(self) -> int:
        return self.get()


class DynVarInteger(TypedField):
    type_name = "int"
    kind = 'i32'

    def get_int(self) -> int:
        return self.get()


class DynVarLong(TypedField):
    type_name = "long"
    kind = 'i64'

    def get_long(self) -> int:
        return self.get()


class DynVarFloat(TypedField):
    type_name = "float"
    kind = 'f32'

    def get_float(self) -> float:
        return self.get()


class DynVarDouble(TypedField):
    type_name = "double"
    kind = 'f64'

    def get_double(self) -> float:
        return self.get()


def current_millis() -> int:
    """Wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class DynVarTime(DynVarLong):
    """
    A long holding a millisecond timestamp.

    ``has_passed_reset`` is a check followed by a write; it is only atomic
    when callers serialize access to the map themselves.
    """
    type_name = "time"

    def get_time(self) -> int:
        return self.get()

    def get_now(self) -> int:
        return current_millis()

    def set_now(self, offset: int = 0) -> 'DynVarTime':
        """Stores the current time, minus ``offset`` milliseconds."""
        self.set(self.get_now() - offset)
        return self

    def has_passed(self, threshold: Union[int, 'DynVarTime']) -> bool:
        """True when more than ``threshold`` milliseconds elapsed since the stored time."""
        if isinstance(threshold, DynVarTime):
            threshold = threshold.get_time()
        return self.get_now() - self.get() > threshold

    def has_passed_reset(self, threshold: Union[int, 'DynVarTime']) -> bool:
        """Like has_passed, and restarts the timer when it returns True."""
        passed = self.has_passed(threshold)
        if passed:
            self.set_now()
        return passed


class DynVarBoolean(DynVarField):
    type_name = "boolean"

    def _read(self) -> Optional[bool]:
        value = self.value
        if value is None or isinstance(value, bool):
            return value
        raise IncompatibleOperandType(value, 'bool')

    def get_boolean(self) -> bool:
        return self.get()

    def get_then_flip(self) -> bool:
        original = self.get()
        self.set(not original)
        return original

    def flip_then_get(self) -> bool:
        self.set(not self.get())
        return self.get()


class DynVarString(DynVarField):
    """A text variant; numbers and booleans carried over by promotion read back as their text."""
    type_name = "string"

    def _read(self) -> Optional[str]:
        value = self.value
        if value is None or isinstance(value, str):
            return value
        return pformat(value)

    def get_string(self) -> str:
        return self.get()


__all__ = [
    "TypedField",
    "DynVarByte", "DynVarShort", "DynVarInteger", "DynVarLong", "DynVarTime",
    "DynVarFloat", "DynVarDouble", "DynVarBoolean", "DynVarString",
    "current_millis",
]
