"""Render an encoded ``KallsymsTable`` as a GNU assembler module.

The output uses only C-style comments and plain data directives, so it
assembles without running the C preprocessor.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..compress.encoder import KallsymsTable, token_index_offsets
from ..config import DEFAULT_CONFIG, KallsymsConfig
from .layout import TablePart, table_layout

HEADER = "/* Kernel symbol table generated by kallsyms. Do not edit. */"

# Bytes written verbatim inside .asciz strings. Quote, backslash, slash and
# star are escaped so a string can never open or close a comment.
_PLAIN_STRING_BYTES = frozenset(
    code for code in range(0x20, 0x7F) if chr(code) not in '"\\/*'
)


def escape_string(data: bytes) -> str:
    """Quote ``data`` for ``.asciz`` using three-digit octal escapes."""
    out = []
    for code in data:
        if code in _PLAIN_STRING_BYTES:
            out.append(chr(code))
        else:
            out.append(f"\\{code:03o}")
    return '"' + "".join(out) + '"'


def comment(text: str) -> str:
    """Wrap ``text`` in a comment that cannot terminate early."""
    return "/* " + text.replace("*/", "* /") + " */"


def _label_block(part: TablePart, config: KallsymsConfig) -> list[str]:
    return [
        "",
        f"\t.globl {part.label}",
        f"\t.balign {config.word_size}",
        f"{part.label}:",
    ]


def _value_lines(part: TablePart, values: Iterable[int]) -> list[str]:
    return [f"\t{part.directive} {value}" for value in values]


def _part_lines(part: TablePart, table: KallsymsTable) -> list[str]:
    if part.name == "num":
        return _value_lines(part, [table.count])
    if part.name == "address":
        return [
            f"\t{part.directive} 0x{address:x}\t{comment(f'{record.type_char} {record.name}')}"
            for address, record in zip(table.addresses, table.records)
        ]
    if part.name == "relative_base":
        return [f"\t{part.directive} 0x{table.relative_base or 0:x}"]
    if part.name == "markers":
        return _value_lines(part, table.markers)
    if part.name == "names":
        return [
            f"\t{part.directive} "
            + ", ".join(f"0x{code:02x}" for code in entry)
            + f"\t{comment(record.name)}"
            for entry, record in zip(table.names, table.records)
        ]
    if part.name == "token_table":
        return [f"\t{part.directive} {escape_string(expansion)}" for expansion in table.token_table.expansions]
    if part.name == "token_index":
        return _value_lines(part, token_index_offsets(table.token_table))
    if part.name == "seqs_of_names":
        return _value_lines(part, table.name_order)
    raise ValueError(f"unknown table part: {part.name}")


def render_assembly(table: KallsymsTable, config: KallsymsConfig = DEFAULT_CONFIG) -> str:
    """Return the complete module text, newline terminated."""
    lines = [HEADER, "", f'\t.section {config.section}, "a"']
    for part in table_layout(config):
        lines.extend(_label_block(part, config))
        lines.extend(_part_lines(part, table))
    return "\n".join(lines) + "\n"


__all__ = ["HEADER", "comment", "escape_string", "render_assembly"]
