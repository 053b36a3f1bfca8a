"""Symbol listing input stage.

Parses nm output into ``SymbolRecord`` values, applies the filtering policy
and returns records sorted by address.
"""

from __future__ import annotations

from .types import KIND_BY_TYPE, SymbolKind, SymbolRecord, UNDEFINED_TYPES, classify_type
from .filters import filter_symbols, ignore_reason, resolve_text_ranges
from .parser import parse_line, parse_listing, read_symbols

__all__ = [
    "KIND_BY_TYPE",
    "SymbolKind",
    "SymbolRecord",
    "UNDEFINED_TYPES",
    "classify_type",
    "filter_symbols",
    "ignore_reason",
    "resolve_text_ranges",
    "parse_line",
    "parse_listing",
    "read_symbols",
]
