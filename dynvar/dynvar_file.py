from __future__ import annotations
import gzip
import logging
import os
from typing import List, Optional

logger = logging.getLogger(__name__)


def resolve_locator(locator: str | os.PathLike, base_dir: Optional[str] = None) -> str:
    """Turns a plain path or a 'file://' locator into a filesystem path."""
    path = os.fspath(locator)
    if path.startswith("file://"):
        path = path[len("file://"):]
    # Relative paths resolve against base_dir; absolute and '~' paths ignore it
    return os.path.normpath(os.path.join(base_dir or os.getcwd(), os.path.expanduser(path)))


def read_lines(locator: str | os.PathLike, *, gzip_mode: bool = False, encoding: str = "utf-8",
               base_dir: Optional[str] = None) -> List[str]:
    """Reads a whole text file (optionally gzip-framed) and returns its lines.

    Raises FileNotFoundError when the file does not exist.
    """
    path = resolve_locator(locator, base_dir)
    if gzip_mode:
        with gzip.open(path, "rt", encoding=encoding) as f:
            text = f.read()
    else:
        with open(path, "r", encoding=encoding) as f:
            text = f.read()
    logger.debug("Read %d characters from %s", len(text), path)
    if not text:
        return []
    # Only line breaks split; other separators splitlines() knows may sit inside values
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def write_text(locator: str | os.PathLike, content: str, *, gzip_mode: bool = False, encoding: str = "utf-8",
               base_dir: Optional[str] = None) -> None:
    """Writes ``content`` in one call, replacing the file. Parent directories are created."""
    path = resolve_locator(locator, base_dir)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    if gzip_mode:
        with gzip.open(path, "wt", encoding=encoding) as f:
            f.write(content)
    else:
        with open(path, "w", encoding=encoding, newline="\n") as f:
            f.write(content)
    logger.debug("Wrote %d characters to %s", len(content), path)
