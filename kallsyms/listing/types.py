"""Symbol record datatypes and nm type-character vocabulary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SymbolKind = Literal["code", "data", "absolute", "weak", "other"]

KIND_BY_TYPE: dict[str, SymbolKind] = {
    "T": "code",
    "t": "code",
    "D": "data",
    "d": "data",
    "B": "data",
    "b": "data",
    "R": "data",
    "r": "data",
    "G": "data",
    "g": "data",
    "S": "data",
    "s": "data",
    "C": "data",
    "A": "absolute",
    "a": "absolute",
    "W": "weak",
    "w": "weak",
    "V": "weak",
    "v": "weak",
}

# nm prints these without an address when the symbol is not defined.
UNDEFINED_TYPES = frozenset("Uwv")


def classify_type(type_char: str) -> SymbolKind:
    """Map an nm type character to its symbol kind."""
    return KIND_BY_TYPE.get(type_char, "other")


@dataclass(frozen=True)
class SymbolRecord:
    """One accepted listing entry."""

    address: int
    type_char: str
    kind: SymbolKind
    name: str
    module: str | None = None
    line_number: int = 0

    @property
    def is_global(self) -> bool:
        return self.type_char.isupper()

    @property
    def name_bytes(self) -> bytes:
        return self.name.encode("utf-8")


__all__ = [
    "KIND_BY_TYPE",
    "SymbolKind",
    "SymbolRecord",
    "UNDEFINED_TYPES",
    "classify_type",
]
