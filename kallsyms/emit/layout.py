"""Frozen layout of the emitted symbol-table module.

The kernel's lookup code depends on the exact label names, part order,
element widths and alignment below; the emitter writes and the reader
parses through this one schema. Multi-byte values are assembled in the
target's native byte order.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import DEFAULT_CONFIG, WORD_DIRECTIVES, KallsymsConfig

DIRECTIVE_BY_WIDTH = {1: ".byte", 2: ".short", 4: ".long", 8: ".quad"}
WIDTH_BY_DIRECTIVE = {directive: width for width, directive in DIRECTIVE_BY_WIDTH.items()}
STRING_DIRECTIVE = ".asciz"

RELATIVE_OFFSET_WIDTH = 4
TOKEN_INDEX_WIDTH = 2
NAME_INDEX_WIDTH = 4


@dataclass(frozen=True)
class TablePart:
    """One labelled array in the module."""

    name: str
    label: str
    directive: str

    @property
    def width(self) -> int:
        """Element width in bytes; 0 for NUL-terminated strings."""
        return WIDTH_BY_DIRECTIVE.get(self.directive, 0)


def table_layout(config: KallsymsConfig = DEFAULT_CONFIG) -> tuple[TablePart, ...]:
    """Parts in emission order for ``config``."""
    word = WORD_DIRECTIVES[config.word_size]

    def part(name: str, directive: str) -> TablePart:
        return TablePart(name=name, label=config.label(name), directive=directive)

    parts = [part("num", word)]
    if config.base_relative:
        parts.append(part("address", DIRECTIVE_BY_WIDTH[RELATIVE_OFFSET_WIDTH]))
        parts.append(part("relative_base", word))
    else:
        parts.append(part("address", word))
    parts.append(part("markers", DIRECTIVE_BY_WIDTH[config.marker_width]))
    parts.append(part("names", DIRECTIVE_BY_WIDTH[1]))
    parts.append(part("token_table", STRING_DIRECTIVE))
    parts.append(part("token_index", DIRECTIVE_BY_WIDTH[TOKEN_INDEX_WIDTH]))
    if config.emit_name_index:
        parts.append(part("seqs_of_names", DIRECTIVE_BY_WIDTH[NAME_INDEX_WIDTH]))
    return tuple(parts)


__all__ = [
    "DIRECTIVE_BY_WIDTH",
    "NAME_INDEX_WIDTH",
    "RELATIVE_OFFSET_WIDTH",
    "STRING_DIRECTIVE",
    "TOKEN_INDEX_WIDTH",
    "TablePart",
    "WIDTH_BY_DIRECTIVE",
    "table_layout",
]
