"""Fatal error taxonomy for the symbol-table compiler.

Every failure aborts the whole run; callers never get a partial table.
"""

from __future__ import annotations


class KallsymsError(Exception):
    """Base class for all generator failures."""


class ParseError(KallsymsError):
    """Malformed listing line."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}: {line!r}")


class CapacityError(KallsymsError):
    """A table part exceeds the limit of its encoding."""


class VerificationError(KallsymsError):
    """Rendered table does not decode back to the input symbols."""


class OutputError(KallsymsError):
    """Input could not be read or output could not be written."""


__all__ = [
    "CapacityError",
    "KallsymsError",
    "OutputError",
    "ParseError",
    "VerificationError",
]
