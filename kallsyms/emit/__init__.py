"""Assembly emission for encoded symbol tables.

This package contains:
- the frozen module layout shared by writer and reader
- the GNU assembler renderer
- a reference reader that decodes emitted modules like the kernel does
"""

from __future__ import annotations

from .layout import TablePart, table_layout
from .assembly import HEADER, comment, escape_string, render_assembly
from .reader import SymbolTableImage, parse_sections, unescape_string, verify_assembly

__all__ = [
    "TablePart",
    "table_layout",
    "HEADER",
    "comment",
    "escape_string",
    "render_assembly",
    "SymbolTableImage",
    "parse_sections",
    "unescape_string",
    "verify_assembly",
]
