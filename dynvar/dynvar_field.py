"""
The DynVarField box: one mutable slot holding a dynamic value.

Every mutator returns the box itself so calls chain, and callers holding a
box observe later mutations made through the owning map.
"""
from typing import Any, Optional

from dynvar.dynvar_datatypes import (
    IncompatibleOperandType, INTEGRAL_KINDS, NUMERIC_KINDS,
    kind_of, cast_to, arithmetic,
)
from dynvar.dynvar_printer import pformat


def same_value(left: Any, right: Any) -> bool:
    """Value equality where a boolean never equals a number (Python has True == 1)."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


class DynVarField:
    """
    A box holding one value of any runtime type.

    Comparisons treat a null current value as never equal to anything, so
    the ``*_if_equals`` forms never fire on null and the ``*_if_not_equals``
    forms always do. Arithmetic on a null or non-numeric value is a silent
    no-op (except ``add``, which stores the argument into a null box and
    concatenates onto a string box).
    """
    type_name = "var"

    def __init__(self, value: Any = None):
        self.value = value

    def set(self, value: Any) -> 'DynVarField':
        self.value = value
        return self

    def get(self, expected_type: Optional[type] = None) -> Any:
        """Returns the value; with ``expected_type``, a non-null value must be an instance of it."""
        value = self._read()
        if expected_type is not None and value is not None and not isinstance(value, expected_type):
            raise IncompatibleOperandType(value, expected_type.__name__)
        return value

    def _read(self) -> Any:
        return self.value

    # --- Composite reads and writes ---

    def set_then_get(self, value: Any) -> Any:
        self.set(value)
        return self.get()

    def set_then_get_if_equals(self, equals: Any, value: Any) -> Any:
        if self.if_equals(equals):
            self.set(value)
        return self.get()

    def set_then_get_if_not_equals(self, equals: Any, value: Any) -> Any:
        if self.if_not_equals(equals):
            self.set(value)
        return self.get()

    def get_then_set(self, value: Any) -> Any:
        original = self.get()
        self.set(value)
        return original

    def get_then_set_if_equals(self, equals: Any, value: Any) -> Any:
        original = self.get()
        if original is not None and same_value(original, equals):
            self.set(value)
        return original

    def get_then_set_if_not_equals(self, equals: Any, value: Any) -> Any:
        original = self.get()
        if original is None or not same_value(original, equals):
            self.set(value)
        return original

    # --- Predicates ---

    def if_equals(self, equals: Any) -> bool:
        current = self.get()
        return current is not None and same_value(current, equals)

    def if_not_equals(self, equals: Any) -> bool:
        current = self.get()
        return current is None or not same_value(current, equals)

    def set_if_equals(self, equals: Any, value: Any) -> bool:
        if self.if_equals(equals):
            self.set(value)
            return True
        return False

    def set_if_not_equals(self, equals: Any, value: Any) -> bool:
        if self.if_not_equals(equals):
            self.set(value)
            return True
        return False

    def equals(self, *values: Any) -> bool:
        """True if any of ``values`` equals the value ``get`` returns."""
        current = self.get()
        for other in values:
            if isinstance(other, DynVarField):
                other = other.get()
            if same_value(current, other):
                return True
        return False

    # --- Arithmetic ---

    def _left_operand(self) -> Any:
        """The value arithmetic treats as the left operand."""
        return self.value

    def _apply(self, op: str, value: Any) -> 'DynVarField':
        left = self._left_operand()
        if kind_of(left) in NUMERIC_KINDS:
            self.value = arithmetic(op, left, value)
        return self

    def add(self, value: Any) -> 'DynVarField':
        current = self.value
        if current is None:
            self.value = value
        elif isinstance(current, str):
            self.value = current + pformat(value)
        else:
            self._apply('add', value)
        return self

    def subtract(self, value: Any) -> 'DynVarField':
        return self._apply('subtract', value)

    def multiply(self, value: Any) -> 'DynVarField':
        return self._apply('multiply', value)

    def divide(self, value: Any) -> 'DynVarField':
        return self._apply('divide', value)

    def bitwise_xor(self, value: Any) -> 'DynVarField':
        """Xor for int and long values; every other type is left unchanged."""
        left = self._left_operand()
        kind = kind_of(left)
        if kind in ('i32', 'i64'):
            if kind_of(value) not in INTEGRAL_KINDS:
                raise IncompatibleOperandType(value, kind)
            self.value = cast_to(int(left) ^ int(value), kind)
        return self

    # --- Protocol ---

    def __str__(self) -> str:
        return pformat(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"

    def __eq__(self, other):
        if not isinstance(other, DynVarField):
            return NotImplemented
        return same_value(self.value, other.value)

    def __hash__(self):
        return hash(self.value)
