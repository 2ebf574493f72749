"""
Renders DynVar values as the text stored in a persisted line.
"""
import math

from dynvar.dynvar_datatypes import Byte, Short, Int, Long, Float, Double, to_f32


class Printer:
    """Formats values into the literal syntax the text codec reads back."""

    def __init__(self):
        self._handlers = self._create_handlers()

    def pformat(self, obj) -> str:
        """Public entry point to format a value."""
        handler = self._get_handler(obj)
        return handler(obj)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        # Subclasses of the builtins (str enums, int flags) format as their base
        if isinstance(obj, bool): return self._pformat_bool
        if isinstance(obj, int): return self._pformat_int
        if isinstance(obj, float): return self._pformat_double
        if isinstance(obj, str): return self._pformat_str
        # Opaque objects use their own text
        return lambda o: str(o)

    def _create_handlers(self):
        return {
            str: self._pformat_str,
            bool: self._pformat_bool,
            type(None): self._pformat_none,
            int: self._pformat_int,
            Byte: self._pformat_int,
            Short: self._pformat_int,
            Int: self._pformat_int,
            Long: self._pformat_int,
            float: self._pformat_double,
            Double: self._pformat_double,
            Float: self._pformat_float,
        }

    def _pformat_str(self, s):
        return str(s)

    def _pformat_bool(self, b):
        return "true" if b else "false"

    def _pformat_none(self, _):
        return "null"

    def _pformat_int(self, i):
        return str(int(i))

    def _pformat_special(self, f):
        if math.isnan(f):
            return "NaN"
        if math.isinf(f):
            return "Infinity" if f > 0 else "-Infinity"
        return None

    def _pformat_double(self, f):
        special = self._pformat_special(f)
        if special is not None:
            return special
        return repr(float(f))

    def _pformat_float(self, f):
        special = self._pformat_special(f)
        if special is not None:
            return special
        # Shortest decimal that reads back as the same single-precision value
        value = float(f)
        for precision in range(1, 10):
            candidate = float(f"{value:.{precision}g}")
            if to_f32(candidate) == value:
                return repr(candidate)
        return repr(value)


_default_printer = Printer()


def pformat(obj) -> str:
    """Formats ``obj`` with a shared Printer instance."""
    return _default_printer.pformat(obj)
