"""
Command-line access to DynVar files.

    dynvar show FILE
    dynvar get FILE KEY
    dynvar set FILE KEY VALUE [--type TYPE]
    dynvar remove FILE KEY
    dynvar export FILE OUT [--format json|yaml]
    dynvar import SRC FILE [--format json|yaml]

``--gzip`` reads and writes FILE gzip-framed; ``--verbose`` enables DEBUG logging.
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from dynvar.dynvar_codec import DynVarSerializer, parse_literal
from dynvar.dynvar_datatypes import Byte, Short, Int, Long, Float, Double
from dynvar.dynvar_file import resolve_locator, write_text
from dynvar.dynvar_map import DynVarMap
from dynvar.dynvar_serialize import detect_format, deserialize, serialize
from dynvar import dynvar_strings as strings

logger = logging.getLogger(__name__)

# --type name → (literal check, parser, typed accessor on DynVarMap)
TYPES = {
    "bool": (strings.is_boolean, strings.parse_boolean, "get_var_boolean"),
    "byte": (strings.is_byte, Byte, "get_var_byte"),
    "short": (strings.is_short, Short, "get_var_short"),
    "int": (strings.is_integer, Int, "get_var_int"),
    "long": (strings.is_long, Long, "get_var_long"),
    "float": (strings.is_float, Float, "get_var_float"),
    "double": (strings.is_double, Double, "get_var_double"),
    "string": (lambda text: True, str, "get_var_string"),
}


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
        datefmt='%H:%M:%S',
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dynvar", description="Inspect and edit DynVar files.")
    parser.add_argument("--gzip", action="store_true", help="FILE is gzip-compressed.")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="List every entry with its type.")
    p.add_argument("file")

    p = sub.add_parser("get", help="Print one value.")
    p.add_argument("file")
    p.add_argument("key")

    p = sub.add_parser("set", help="Store one value and save.")
    p.add_argument("file")
    p.add_argument("key")
    p.add_argument("value")
    p.add_argument("--type", choices=sorted(TYPES), default=None,
                   help="Store as this type instead of sniffing the literal.")

    p = sub.add_parser("remove", help="Delete one entry and save.")
    p.add_argument("file")
    p.add_argument("key")

    p = sub.add_parser("export", help="Write the entries as JSON or YAML.")
    p.add_argument("file")
    p.add_argument("out")
    p.add_argument("--format", choices=["json", "yaml"], default=None)

    p = sub.add_parser("import", help="Merge a JSON or YAML mapping into FILE.")
    p.add_argument("src")
    p.add_argument("file")
    p.add_argument("--format", choices=["json", "yaml"], default=None)
    return parser


def _open(args) -> Optional[DynVarSerializer]:
    """Loads FILE. A missing FILE opens empty; an unreadable one returns None."""
    serializer = DynVarSerializer(args.file, DynVarMap(), gzip_mode=args.gzip)
    if not serializer.load() and os.path.exists(resolve_locator(args.file)):
        hint = "" if args.gzip else " (gzip-compressed? try --gzip)"
        print(f"Error: could not read {args.file}{hint}", file=sys.stderr)
        return None
    return serializer


def _save(serializer: DynVarSerializer) -> int:
    if not serializer.save():
        print(f"Error: could not write {serializer.file}", file=sys.stderr)
        return 1
    return 0


def cmd_show(args) -> int:
    serializer = _open(args)
    if serializer is None:
        return 1
    dyn_map = serializer.map
    dyn_map.for_each(lambda key, field: print(f"{key} [{field.type_name}] = {field}"))
    return 0


def cmd_get(args) -> int:
    serializer = _open(args)
    if serializer is None:
        return 1
    dyn_map = serializer.map
    if not dyn_map.contains_key(args.key):
        print(f"Error: no such key: {args.key}", file=sys.stderr)
        return 1
    print(dyn_map.get(args.key))
    return 0


def cmd_set(args) -> int:
    serializer = _open(args)
    if serializer is None:
        return 1
    if args.type is None:
        serializer.map.put(args.key, parse_literal(args.value))
    else:
        check, parse, accessor = TYPES[args.type]
        if not check(args.value):
            print(f"Error: {args.value!r} is not a valid {args.type}", file=sys.stderr)
            return 2
        getattr(serializer.map, accessor)(args.key).set(parse(args.value))
    return _save(serializer)


def cmd_remove(args) -> int:
    serializer = _open(args)
    if serializer is None:
        return 1
    if serializer.map.remove(args.key) is None:
        print(f"Error: no such key: {args.key}", file=sys.stderr)
        return 1
    return _save(serializer)


def cmd_export(args) -> int:
    fmt = args.format or detect_format(args.out)
    if fmt is None:
        print(f"Error: cannot tell the format of {args.out}; pass --format", file=sys.stderr)
        return 2
    serializer = _open(args)
    if serializer is None:
        return 1
    try:
        write_text(args.out, serialize(serializer.map, fmt=fmt))
    except OSError as e:
        print(f"Error: could not write {args.out}: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_import(args) -> int:
    try:
        data = Path(args.src).read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: file not found: {args.src}", file=sys.stderr)
        return 1
    serializer = _open(args)
    if serializer is None:
        return 1
    try:
        deserialize(data, fmt=args.format or detect_format(args.src, data), dyn_map=serializer.map)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: cannot import {args.src}: {e}", file=sys.stderr)
        return 1
    return _save(serializer)


COMMANDS = {
    "show": cmd_show,
    "get": cmd_get,
    "set": cmd_set,
    "remove": cmd_remove,
    "export": cmd_export,
    "import": cmd_import,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    if args.verbose:
        logger.debug("Verbose logging enabled.")
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
