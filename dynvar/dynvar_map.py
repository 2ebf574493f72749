"""
DynVarMap: an insertion-ordered table of named DynVarField boxes.

Reading a key that does not exist creates it, so callers never see a
missing-key error. Typed accessors promote a slot to the requested variant,
carrying the old value into the new box.
"""
from typing import Any, Callable, Dict, Iterator, KeysView, Optional, Type, TypeVar

from dynvar.dynvar_datatypes import Byte, Short, Int, Long, Float, INT_MIN, INT_MAX
from dynvar.dynvar_field import DynVarField
from dynvar.dynvar_vars import (
    DynVarBoolean, DynVarByte, DynVarDouble, DynVarFloat, DynVarInteger,
    DynVarLong, DynVarShort, DynVarString, DynVarTime, current_millis,
)

F = TypeVar("F", bound=DynVarField)

DEFAULT_STRING = ""
DEFAULT_BOOLEAN = False
DEFAULT_INTEGER = 0
DEFAULT_LONG = 0
DEFAULT_BYTE = 0
DEFAULT_SHORT = 0
DEFAULT_DOUBLE = 0.0
DEFAULT_FLOAT = 0.0


class DynVarMap:
    """Maps string keys to DynVarField boxes; see the module docstring."""

    def __init__(self):
        self._fields: Dict[str, DynVarField] = {}

    # --- Untyped access ---

    def get(self, key: str, default: Any = None) -> DynVarField:
        """Returns the box for ``key``, creating it (seeded with ``default``) when absent."""
        field = self._get_direct(key)
        if field is None:
            field = DynVarField()
            if default is not None:
                field.set(default)
            self._put_direct(key, field)
        return field

    def get_value(self, key: str) -> Any:
        """Returns the raw value for ``key``, or None when absent. Does not create the key."""
        field = self._get_direct(key)
        if field is None:
            return None
        return field.get()

    def remove(self, key: str) -> Optional[DynVarField]:
        return self._fields.pop(key, None)

    # --- Typed access ---

    def _get_var(self, key: str, cls: Type[F], default: Any) -> F:
        field = self._get_direct(key)
        if isinstance(field, cls):
            return field
        promoted = cls()
        # Carry the old value across the type change
        promoted.set(field.value if field is not None else default)
        self._put_direct(key, promoted)
        return promoted

    def get_var_int(self, key: str, default: int = DEFAULT_INTEGER) -> DynVarInteger:
        return self._get_var(key, DynVarInteger, default)

    def get_int(self, key: str, default: int = DEFAULT_INTEGER) -> int:
        return self.get_var_int(key, default).get_int()

    def get_var_long(self, key: str, default: int = DEFAULT_LONG) -> DynVarLong:
        return self._get_var(key, DynVarLong, default)

    def get_long(self, key: str, default: int = DEFAULT_LONG) -> int:
        return self.get_var_long(key, default).get_long()

    def get_var_byte(self, key: str, default: int = DEFAULT_BYTE) -> DynVarByte:
        return self._get_var(key, DynVarByte, default)

    def get_byte(self, key: str, default: int = DEFAULT_BYTE) -> int:
        return self.get_var_byte(key, default).get_byte()

    def get_var_short(self, key: str, default: int = DEFAULT_SHORT) -> DynVarShort:
        return self._get_var(key, DynVarShort, default)

    def get_short(self, key: str, default: int = DEFAULT_SHORT) -> int:
        return self.get_var_short(key, default).get_short()

    def get_var_double(self, key: str, default: float = DEFAULT_DOUBLE) -> DynVarDouble:
        return self._get_var(key, DynVarDouble, default)

    def get_double(self, key: str, default: float = DEFAULT_DOUBLE) -> float:
        return self.get_var_double(key, default).get_double()

    def get_var_float(self, key: str, default: float = DEFAULT_FLOAT) -> DynVarFloat:
        return self._get_var(key, DynVarFloat, default)

    def get_float(self, key: str, default: float = DEFAULT_FLOAT) -> float:
        return self.get_var_float(key, default).get_float()

    def get_var_time(self, key: str, default: Optional[int] = None) -> DynVarTime:
        """Time slots default to the current time in milliseconds."""
        if default is None:
            default = current_millis()
        return self._get_var(key, DynVarTime, default)

    def get_time(self, key: str, default: Optional[int] = None) -> int:
        return self.get_var_time(key, default).get_time()

    def get_var_boolean(self, key: str, default: bool = DEFAULT_BOOLEAN) -> DynVarBoolean:
        return self._get_var(key, DynVarBoolean, default)

    def get_boolean(self, key: str, default: bool = DEFAULT_BOOLEAN) -> bool:
        return self.get_var_boolean(key, default).get_boolean()

    def flip_boolean(self, key: str, default: bool = DEFAULT_BOOLEAN) -> bool:
        """Negates the boolean at ``key`` and returns the new value."""
        current = self.get_boolean(key, default)
        self.put(key, not current)
        return self.get_boolean(key, default)

    def get_var_string(self, key: str, default: str = DEFAULT_STRING) -> DynVarString:
        return self._get_var(key, DynVarString, default)

    def get_string(self, key: str, default: str = DEFAULT_STRING) -> str:
        return self.get_var_string(key, default).get_string()

    # --- Writes ---

    def put(self, key: str, value: Any) -> 'DynVarMap':
        """Stores ``value`` in the variant matching its runtime type."""
        match value:
            case bool():
                self.get_var_boolean(key).set(value)
            case str():
                self.get_var_string(key).set(value)
            case Byte() | Short() | Long():
                self.get_var_long(key).set(value)
            case Int():
                self.get_var_int(key).set(value)
            case int():
                if INT_MIN <= value <= INT_MAX:
                    self.get_var_int(key).set(value)
                else:
                    self.get_var_long(key).set(value)
            case Float():
                self.get_var_float(key).set(value)
            case float():
                self.get_var_double(key).set(value)
            case _:
                self.get(key).set(value)
        return self

    def set(self, key: str, value: Any) -> 'DynVarMap':
        return self.put(key, value)

    # --- Bulk operations ---

    def for_each(self, action: Callable[[str, DynVarField], Any]) -> 'DynVarMap':
        for key, field in list(self._fields.items()):
            action(key, field)
        return self

    def get_size(self) -> int:
        return len(self._fields)

    def get_length(self) -> int:
        return len(self._fields)

    def contains_key(self, key: str) -> bool:
        return key in self._fields

    def is_empty(self) -> bool:
        return not self._fields

    def clear(self) -> None:
        self._fields.clear()

    def key_set(self) -> KeysView[str]:
        """Keys in insertion order."""
        return self._fields.keys()

    # --- Direct table access (see DynVarUnsafe) ---

    def _get_direct(self, key: str) -> Optional[DynVarField]:
        return self._fields.get(key)

    def _put_direct(self, key: str, field: DynVarField) -> Optional[DynVarField]:
        if not isinstance(key, str):
            raise TypeError(f"DynVarMap key must be a str, not {type(key)}")
        if not isinstance(field, DynVarField):
            raise TypeError(f"DynVarMap value must be a DynVarField, not {type(field)}")
        previous = self._fields.get(key)
        self._fields[key] = field
        return previous

    # --- Mapping protocol ---

    def __getitem__(self, key: str) -> DynVarField:
        return self.get(key)

    def __setitem__(self, key: str, value: Any):
        self.put(key, value)

    def __delitem__(self, key: str):
        if key not in self._fields:
            raise KeyError(f"'{key}'")
        del self._fields[key]

    def __contains__(self, key: Any) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def keys(self) -> KeysView[str]:
        return self._fields.keys()

    def __eq__(self, other):
        if not isinstance(other, DynVarMap):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        keys = ', '.join(self._fields.keys())
        return f"<DynVarMap fields=[{keys}]>"


class DynVarUnsafe:
    """Direct access to a map's table, bypassing creation and type inference."""

    @staticmethod
    def get_fields(dyn_map: DynVarMap) -> Dict[str, DynVarField]:
        """Returns the live backing dict."""
        return dyn_map._fields

    @staticmethod
    def put_direct(dyn_map: DynVarMap, key: str, field: DynVarField) -> Optional[DynVarField]:
        """Stores ``field`` under ``key`` and returns the box it replaced, if any."""
        return dyn_map._put_direct(key, field)

    @staticmethod
    def get_direct(dyn_map: DynVarMap, key: str) -> Optional[DynVarField]:
        """Returns the box for ``key`` or None; never creates it."""
        return dyn_map._get_direct(key)


__all__ = ["DynVarMap", "DynVarUnsafe"]
