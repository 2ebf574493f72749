"""
The sigil-tagged text format DynVarMaps persist to.

Each entry is one line ``<sigil><key>=<value>``. The sigil names the type
the value was stored as; a line without a sigil has its type sniffed from
the literal, which keeps hand-written configuration files loadable.

    ^   boolean     >>  float      >   double
    $$  long        $   int        &   string

Two-character sigils are tried before their one-character prefixes.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from dynvar.dynvar_datatypes import Float, Double, Int, Long, Short
from dynvar.dynvar_field import DynVarField
from dynvar.dynvar_file import read_lines, write_text
from dynvar.dynvar_map import DynVarMap
from dynvar.dynvar_printer import pformat
from dynvar import dynvar_strings as strings
from dynvar.dynvar_vars import (
    DynVarBoolean, DynVarDouble, DynVarFloat, DynVarInteger, DynVarLong, DynVarString,
)

logger = logging.getLogger(__name__)

# Decode order: (sigil, literal check, parser). '&' accepts any literal.
SIGILS: List[Tuple[str, Callable[[str], bool], Callable[[str], Any]]] = [
    ("^", strings.is_boolean, strings.parse_boolean),
    (">>", strings.is_float, Float),
    (">", strings.is_double, Double),
    ("$$", strings.is_long, Long),
    ("$", strings.is_integer, Int),
    ("&", lambda text: True, str),
]

# Encode order matters where variants subclass one another (time is a long)
_FIELD_SIGILS: List[Tuple[type, str]] = [
    (DynVarBoolean, "^"),
    (DynVarFloat, ">>"),
    (DynVarDouble, ">"),
    (DynVarLong, "$$"),
    (DynVarInteger, "$"),
    (DynVarString, "&"),
]

# Fallback for lines without a usable sigil
_SNIFFERS: List[Tuple[Callable[[str], bool], Callable[[str], Any]]] = [
    (strings.is_boolean, strings.parse_boolean),
    (strings.is_integer, Int),
    (strings.is_double, Double),
    (strings.is_float, Float),
    (strings.is_short, Short),
]


def sigil_for(field: DynVarField) -> str:
    """Returns the sigil for a box, or '' for untyped boxes and unsigiled variants."""
    for cls, sigil in _FIELD_SIGILS:
        if isinstance(field, cls):
            return sigil
    return ""


def parse_literal(text: str) -> Any:
    """Sniffs a literal: boolean, int, double, float, short, else the text itself."""
    for check, parse in _SNIFFERS:
        if check(text):
            return parse(text)
    return text


def decode_entry(key: str, value: str) -> Tuple[str, Any]:
    """Resolves a split line into the key to store under and its typed value."""
    for sigil, check, parse in SIGILS:
        if key.startswith(sigil) and check(value):
            return key[len(sigil):], parse(value)
    # No sigil matched; the key keeps any sigil-like prefix it carried
    return key, parse_literal(value)


def encode_line(key: str, field: DynVarField) -> str:
    return f"{sigil_for(field)}{key}={pformat(field.get())}"


def dumps(dyn_map: DynVarMap) -> str:
    """Encodes every entry in insertion order; lines are newline-joined without a trailing newline."""
    return "\n".join(encode_line(key, dyn_map.get(key)) for key in dyn_map.key_set())


def load_lines(lines: Iterable[str], dyn_map: DynVarMap) -> int:
    """
    Decodes persisted lines into ``dyn_map`` and returns how many entries were stored.

    Blank lines, comments ('//' or '#') and lines without '=' are skipped.
    A line that fails to decode is logged and skipped; it never stops the load.
    """
    loaded = 0
    for number, line in enumerate(lines, start=1):
        try:
            if line.startswith("//") or line.startswith("#") or "=" not in line:
                continue
            parts = strings.split_first(line, "=", 2)
            if len(parts) != 2:
                continue
            key, value = parts
            if not key or not value:
                continue
            name, parsed = decode_entry(key, value)
            dyn_map.put(name, parsed)
            loaded += 1
        except Exception:
            logger.warning("Skipping line %d (%r): could not decode", number, line, exc_info=True)
    return loaded


def loads(data: str | Iterable[str], dyn_map: Optional[DynVarMap] = None) -> DynVarMap:
    """Decodes text (or an iterable of lines) into ``dyn_map``, or a new map, and returns it."""
    if dyn_map is None:
        dyn_map = DynVarMap()
    if isinstance(data, str):
        data = data.replace("\r\n", "\n").split("\n")
    load_lines(data, dyn_map)
    return dyn_map


class DynVarSerializer:
    """
    Loads and saves one DynVarMap to one file, optionally gzip-framed.

    ``config`` keys: ``encoding`` (default 'utf-8'), ``base_dir`` (resolves
    relative paths; default is the working directory).
    """

    def __init__(self, file: str | os.PathLike, dyn_map: DynVarMap, gzip_mode: bool = False,
                 config: Optional[Dict[str, Any]] = None):
        self._file = file
        self._map = dyn_map
        self._gzip_mode = gzip_mode
        cfg = dict(config or {})
        self.encoding: str = cfg.get("encoding") or "utf-8"
        self.base_dir: Optional[str] = cfg.get("base_dir")

    @property
    def file(self) -> str | os.PathLike:
        return self._file

    @property
    def map(self) -> DynVarMap:
        return self._map

    @property
    def gzip_mode(self) -> bool:
        return self._gzip_mode

    def load(self) -> bool:
        """Reads the file into the map. Returns False (map untouched) if it is missing or unreadable."""
        try:
            lines = read_lines(self._file, gzip_mode=self._gzip_mode, encoding=self.encoding,
                               base_dir=self.base_dir)
        except FileNotFoundError:
            logger.debug("Nothing to load, %s does not exist", self._file)
            return False
        except Exception:
            logger.exception("Failed to read %s", self._file)
            return False
        self.load_lines(lines)
        return True

    def load_lines(self, lines: Iterable[str]) -> int:
        loaded = load_lines(lines, self._map)
        logger.debug("Loaded %d entries into the map", loaded)
        return loaded

    def save_to_string(self) -> str:
        return dumps(self._map)

    def save(self) -> bool:
        """Writes the whole map in one call. Returns False if the write failed."""
        try:
            write_text(self._file, self.save_to_string(), gzip_mode=self._gzip_mode,
                       encoding=self.encoding, base_dir=self.base_dir)
            return True
        except Exception:
            logger.exception("Failed to save %s", self._file)
            return False

    def __repr__(self) -> str:
        return f"<DynVarSerializer file={os.fspath(self._file)!r} gzip={self._gzip_mode}>"


__all__ = [
    "SIGILS",
    "sigil_for",
    "parse_literal",
    "decode_entry",
    "encode_line",
    "dumps",
    "load_lines",
    "loads",
    "DynVarSerializer",
]
