"""Input reading and all-or-nothing output writing.

Files are written to a temporary sibling and renamed into place, so a failed
run never leaves a partial module for the build to assemble.
"""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

from .errors import OutputError

STDIO_PATH = "-"


def _read_stdin() -> str:
    stream = getattr(sys.stdin, "buffer", None)
    if stream is None:
        return sys.stdin.read()
    return stream.read().decode("utf-8", errors="surrogateescape")


def read_listing(source: str) -> list[str]:
    """Read listing lines from ``source`` (``-`` for stdin).

    Bytes that are not valid UTF-8 survive as surrogate escapes, so the
    parser can reject them with the line number they came from.
    """
    try:
        if source == STDIO_PATH:
            return _read_stdin().splitlines()
        return Path(source).read_text(encoding="utf-8", errors="surrogateescape").splitlines()
    except OSError as exc:
        raise OutputError(f"cannot read {source}: {exc.strerror or exc}") from exc


def write_atomic(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` in one rename."""
    directory = path.parent
    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    except OSError as exc:
        raise OutputError(f"cannot write {path}: {exc.strerror or exc}") from exc

    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise OutputError(f"cannot write {path}: {exc.strerror or exc}") from exc


def write_output(destination: str, text: str) -> None:
    """Write the finished module to ``destination`` (``-`` for stdout)."""
    if destination == STDIO_PATH:
        try:
            sys.stdout.write(text)
            sys.stdout.flush()
        except OSError as exc:
            raise OutputError(f"cannot write to stdout: {exc.strerror or exc}") from exc
        return
    write_atomic(Path(destination), text)


__all__ = ["STDIO_PATH", "read_listing", "write_atomic", "write_output"]
