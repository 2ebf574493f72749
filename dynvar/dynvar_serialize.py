from __future__ import annotations

import json
import os
from typing import Any, Optional
import collections.abc

import yaml

from dynvar.dynvar_datatypes import kind_of, INTEGRAL_KINDS, FLOATING_KINDS
from dynvar.dynvar_map import DynVarMap


# --------------------------
# Helpers
# --------------------------

def _norm_text(data: bytes | bytearray | str, *, encoding: Optional[str] = None) -> str:
    if isinstance(data, (bytes, bytearray)):
        return data.decode(encoding or 'utf-8', errors='replace')
    if isinstance(data, str):
        return data
    return str(data)


def _to_builtin_value(value: Any) -> Any:
    # Fixed-width numbers export as the plain builtins json/yaml know
    kind = kind_of(value)
    if kind in INTEGRAL_KINDS:
        return int(value)
    if kind in FLOATING_KINDS:
        return float(value)
    if isinstance(value, list):
        return [_to_builtin_value(x) for x in value]
    if isinstance(value, collections.abc.Mapping):
        return {k: _to_builtin_value(v) for k, v in value.items()}
    return value


def to_builtin(dyn_map: DynVarMap) -> dict:
    """Returns a plain dict of key → value in insertion order."""
    return {key: _to_builtin_value(dyn_map.get(key).get()) for key in dyn_map.key_set()}


def detect_format(path: Optional[str | os.PathLike] = None, data_hint: Optional[str] = None) -> Optional[str]:
    """
    Returns a canonical format name among: 'json', 'yaml'.
    Uses the file extension first; falls back to simple data sniffing if provided.
    """
    if path is not None:
        ext = os.path.splitext(os.fspath(path))[1].lower()
        if ext == '.json':
            return 'json'
        if ext in ('.yaml', '.yml'):
            return 'yaml'

    # Heuristics based on data
    if data_hint is not None:
        s = data_hint.lstrip()
        if s.startswith('{'):
            return 'json'
        if s:
            # YAML is a superset; a mapping document parses either way
            return 'yaml'
    return None


# --------------------------
# Public API
# --------------------------

def deserialize(data: bytes | bytearray | str,
                *,
                fmt: Optional[str] = None,
                dyn_map: Optional[DynVarMap] = None) -> DynVarMap:
    """
    Convert a JSON or YAML mapping document into a DynVarMap.
    Top-level values go through DynVarMap.put, so scalars land in their
    typed variants and nested lists/mappings are kept as opaque values.
    If fmt is None, the format is sniffed from the data.
    """
    text = _norm_text(data)
    f = fmt or detect_format(data_hint=text)
    if f == 'json':
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError:
            # Fallback to YAML if declared JSON but content is actually YAML-like
            loaded = yaml.safe_load(text)
    elif f == 'yaml':
        loaded = yaml.safe_load(text)
    elif f is None:
        loaded = {}
    else:
        raise ValueError(f"Unsupported serialization format: {fmt!r}")

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, collections.abc.Mapping):
        raise ValueError(f"Expected a mapping document, got {type(loaded).__name__}")
    out = dyn_map if dyn_map is not None else DynVarMap()
    for key, value in loaded.items():
        out.put(str(key), value)
    return out


def serialize(dyn_map: DynVarMap,
              *,
              fmt: str,
              pretty: bool = True) -> str:
    """
    Convert a DynVarMap into a JSON or YAML mapping document.
    - fmt: 'json' | 'yaml'
    Number widths are not recorded; the sigil text format is the lossless one.
    """
    f = (fmt or '').lower()
    built = to_builtin(dyn_map)
    if f == 'json':
        return json.dumps(built, ensure_ascii=False, indent=2 if pretty else None)
    if f == 'yaml':
        return yaml.safe_dump(built, sort_keys=False, default_flow_style=not pretty)
    raise ValueError(f"Unsupported serialization format: {fmt!r}")


__all__ = [
    "to_builtin",
    "deserialize",
    "serialize",
    "detect_format",
]
