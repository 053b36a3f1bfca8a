"""Filtering policy for symbols that must never reach the runtime table."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..config import DEFAULT_CONFIG, KallsymsConfig
from .types import SymbolRecord

logger = logging.getLogger(__name__)


def ignore_reason(record: SymbolRecord, config: KallsymsConfig = DEFAULT_CONFIG) -> str | None:
    """Return why ``record`` is excluded, or ``None`` when it is kept.

    Only per-record rules live here; duplicates and text ranges need the
    whole listing and are handled by ``filter_symbols``.
    """
    name = record.name
    if record.type_char in config.ignored_types:
        return f"type {record.type_char!r}"
    if name in config.table_labels:
        return "table label"
    if name.startswith(config.ignored_prefixes):
        return "reserved prefix"
    if name.endswith(config.ignored_suffixes):
        return "reserved suffix"
    if len(record.name_bytes) > config.max_name_length:
        return "name too long"
    return None


def resolve_text_ranges(
    records: Sequence[SymbolRecord],
    config: KallsymsConfig = DEFAULT_CONFIG,
) -> list[tuple[int, int]]:
    """Resolve configured ``(start, end)`` marker names to address ranges.

    Ranges with a missing marker are left out.
    """
    first_address: dict[str, int] = {}
    for record in records:
        first_address.setdefault(record.name, record.address)

    ranges: list[tuple[int, int]] = []
    for start_name, end_name in config.text_ranges:
        start = first_address.get(start_name)
        end = first_address.get(end_name)
        if start is None or end is None:
            continue
        ranges.append((start, end))
    return ranges


def _in_ranges(address: int, ranges: Sequence[tuple[int, int]]) -> bool:
    return any(start <= address <= end for start, end in ranges)


def filter_symbols(
    records: Sequence[SymbolRecord],
    config: KallsymsConfig = DEFAULT_CONFIG,
) -> list[SymbolRecord]:
    """Apply the filtering policy, preserving input order."""
    ranges: list[tuple[int, int]] = []
    if not config.all_symbols:
        ranges = resolve_text_ranges(records, config)

    seen: set[tuple[int, str, str]] = set()
    kept: list[SymbolRecord] = []
    for record in records:
        reason = ignore_reason(record, config)
        if reason == "name too long":
            logger.warning(
                "skipping symbol at line %d: name longer than %d bytes",
                record.line_number,
                config.max_name_length,
            )
            continue
        if reason is not None:
            continue
        if ranges and not _in_ranges(record.address, ranges):
            continue
        key = (record.address, record.type_char, record.name)
        if key in seen:
            continue
        seen.add(key)
        kept.append(record)

    if len(kept) != len(records):
        logger.debug("filtered out %d symbols", len(records) - len(kept))
    return kept


__all__ = ["filter_symbols", "ignore_reason", "resolve_text_ranges"]
