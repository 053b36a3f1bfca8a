"""Compiled-in table policy.

Filtering rules, layout widths and capacity limits travel together in one
immutable ``KallsymsConfig`` handed to every pipeline stage. The generator
exposes none of it on the command line; tests build variants with
``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

WORD_DIRECTIVES = {4: ".long", 8: ".quad"}
MARKER_WIDTHS = (2, 4, 8)

IGNORED_TYPES = frozenset("aNUw-?")
IGNORED_PREFIXES = (
    ".L",
    "$",
    "__crc_",
    "__kstrtab_",
    "__kstrtabns_",
    "__ksymtab_",
    "__efistub_",
    "__func__.",
    "GCC_except_table",
    "anon.",
)
IGNORED_SUFFIXES = ("_veneer", "_from_arm", "_from_thumb")
TEXT_RANGES = (
    ("_text", "_etext"),
    ("_stext", "_etext"),
    ("_sinittext", "_einittext"),
)

TABLE_LABELS = (
    "num",
    "address",
    "relative_base",
    "markers",
    "names",
    "token_table",
    "token_index",
    "seqs_of_names",
)


@dataclass(frozen=True)
class KallsymsConfig:
    """Policy shared by parser, filter, planner, encoder and emitter."""

    word_size: int = 8
    marker_interval: int = 256
    marker_width: int = 4
    max_symbols: int = 1 << 20
    max_name_length: int = 512
    base_relative: bool = False
    all_symbols: bool = True
    emit_name_index: bool = True
    section: str = ".rodata"
    label_prefix: str = "kallsyms_"
    ignored_types: frozenset[str] = IGNORED_TYPES
    ignored_prefixes: tuple[str, ...] = IGNORED_PREFIXES
    ignored_suffixes: tuple[str, ...] = IGNORED_SUFFIXES
    text_ranges: tuple[tuple[str, str], ...] = TEXT_RANGES

    def __post_init__(self) -> None:
        if self.word_size not in WORD_DIRECTIVES:
            raise ValueError(f"unsupported word size: {self.word_size}")
        if self.marker_width not in MARKER_WIDTHS:
            raise ValueError(f"unsupported marker width: {self.marker_width}")
        if self.marker_interval <= 0:
            raise ValueError("marker interval must be >= 1")
        if self.max_symbols < 0:
            raise ValueError("max symbols must be >= 0")
        if self.max_name_length <= 0:
            raise ValueError("max name length must be >= 1")
        if not self.label_prefix:
            raise ValueError("label prefix must not be empty")

    @property
    def max_address(self) -> int:
        """Largest address representable in one machine word."""
        return (1 << (8 * self.word_size)) - 1

    @property
    def max_marker(self) -> int:
        return (1 << (8 * self.marker_width)) - 1

    def label(self, name: str) -> str:
        """Return the assembler label for table part ``name``."""
        return self.label_prefix + name

    @cached_property
    def table_labels(self) -> frozenset[str]:
        """All labels the emitted module may define."""
        return frozenset(self.label(name) for name in TABLE_LABELS)


DEFAULT_CONFIG = KallsymsConfig()


__all__ = [
    "DEFAULT_CONFIG",
    "IGNORED_PREFIXES",
    "IGNORED_SUFFIXES",
    "IGNORED_TYPES",
    "KallsymsConfig",
    "MARKER_WIDTHS",
    "TABLE_LABELS",
    "TEXT_RANGES",
    "WORD_DIRECTIVES",
]
