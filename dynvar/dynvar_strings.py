"""
Literal classification for persisted values.

The text codec asks these predicates which type a value's syntax can hold
before parsing it, so a persisted line never has to be parsed twice.
"""
import re
from typing import List

_INTEGRAL_RE = re.compile(r'[+-]?\d+')
_FLOATING_RE = re.compile(
    r'[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?'
    r'|NaN|nan|Infinity|infinity|inf|Inf)'
)


def _in_range(text: str, bits: int) -> bool:
    if not _INTEGRAL_RE.fullmatch(text):
        return False
    value = int(text)
    return -(1 << (bits - 1)) <= value < (1 << (bits - 1))


def is_boolean(text: str) -> bool:
    return text.lower() in ("true", "false")


def parse_boolean(text: str) -> bool:
    return text.lower() == "true"


def is_byte(text: str) -> bool:
    return _in_range(text, 8)


def is_short(text: str) -> bool:
    return _in_range(text, 16)


def is_integer(text: str) -> bool:
    return _in_range(text, 32)


def is_long(text: str) -> bool:
    return _in_range(text, 64)


def is_double(text: str) -> bool:
    return _FLOATING_RE.fullmatch(text) is not None


def is_float(text: str) -> bool:
    # Single precision accepts the same syntax; out-of-range values become infinite
    return is_double(text)


def split_first(text: str, delimiter: str, limit: int = 2) -> List[str]:
    """Splits ``text`` on ``delimiter`` into at most ``limit`` parts, left to right."""
    return text.split(delimiter, limit - 1)


__all__ = [
    "is_boolean", "parse_boolean", "is_byte", "is_short", "is_integer", "is_long",
    "is_double", "is_float", "split_first",
]
