"""Encode sorted symbol records into the table parts the kernel reads.

Produces the address array, the length-prefixed compressed name blob, the
marker offsets into that blob, and the name-ordered index. Every capacity
limit is checked here; nothing is ever truncated.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..config import DEFAULT_CONFIG, KallsymsConfig
from ..errors import CapacityError
from ..listing.types import SymbolRecord
from .tokens import CompressionPlan, TokenTable, build_token_table

logger = logging.getLogger(__name__)

SHORT_NAME_LIMIT = 0x80
MAX_ENCODED_NAME = 0x3FFF
MAX_RELATIVE_OFFSET = 0xFFFFFFFF
MAX_TOKEN_INDEX = 0xFFFF


@dataclass(frozen=True)
class KallsymsTable:
    """All encoded parts of one symbol table, ready for emission."""

    records: tuple[SymbolRecord, ...]
    addresses: tuple[int, ...]
    relative_base: int | None
    markers: tuple[int, ...]
    names: tuple[bytes, ...]
    token_table: TokenTable
    name_order: tuple[int, ...] = ()

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def blob(self) -> bytes:
        return b"".join(self.names)


def length_prefix(length: int) -> bytes:
    """Encode an entry length: one byte below 0x80, otherwise two."""
    if length < SHORT_NAME_LIMIT:
        return bytes((length,))
    if length > MAX_ENCODED_NAME:
        raise CapacityError(f"encoded name length {length} exceeds {MAX_ENCODED_NAME}")
    return bytes((SHORT_NAME_LIMIT | (length & 0x7F), length >> 7))


def read_length_prefix(blob: bytes, offset: int) -> tuple[int, int]:
    """Return ``(length, prefix_size)`` of the entry starting at ``offset``."""
    first = blob[offset]
    if first < SHORT_NAME_LIMIT:
        return first, 1
    return (first & 0x7F) | (blob[offset + 1] << 7), 2


def compute_markers(names: Sequence[bytes], interval: int) -> list[int]:
    """Offsets of every ``interval``-th entry in the concatenated blob."""
    markers: list[int] = []
    offset = 0
    for idx, entry in enumerate(names):
        if idx % interval == 0:
            markers.append(offset)
        offset += len(entry)
    return markers


def _addresses(
    records: Sequence[SymbolRecord],
    config: KallsymsConfig,
) -> tuple[tuple[int, ...], int | None]:
    if not config.base_relative:
        return tuple(record.address for record in records), None

    base = records[0].address if records else 0
    offsets: list[int] = []
    for record in records:
        offset = record.address - base
        if offset > MAX_RELATIVE_OFFSET:
            raise CapacityError(
                f"symbol {record.name!r} is 0x{offset:x} bytes past the relative base"
            )
        offsets.append(offset)
    return tuple(offsets), base


def token_index_offsets(table: TokenTable) -> list[int]:
    """Byte offsets of each NUL-terminated expansion in the token table."""
    offsets: list[int] = []
    position = 0
    for expansion in table.expansions:
        if position > MAX_TOKEN_INDEX:
            raise CapacityError(f"token table offset {position} exceeds {MAX_TOKEN_INDEX}")
        offsets.append(position)
        position += len(expansion) + 1
    return offsets


def encode_table(
    records: Sequence[SymbolRecord],
    config: KallsymsConfig = DEFAULT_CONFIG,
    plan: CompressionPlan | None = None,
) -> KallsymsTable:
    """Build every table part for ``records``, which must be address sorted."""
    if len(records) > config.max_symbols:
        raise CapacityError(
            f"{len(records)} symbols exceed the table limit of {config.max_symbols}"
        )
    if plan is None:
        plan = build_token_table([record.name_bytes for record in records])

    names = tuple(length_prefix(len(encoded)) + encoded for encoded in plan.encoded_names)
    blob_length = sum(len(entry) for entry in names)
    if blob_length > config.max_marker:
        raise CapacityError(
            f"name blob of {blob_length} bytes does not fit {config.marker_width}-byte markers"
        )
    token_index_offsets(plan.table)

    addresses, relative_base = _addresses(records, config)
    name_order: tuple[int, ...] = ()
    if config.emit_name_index:
        name_order = tuple(sorted(range(len(records)), key=lambda idx: records[idx].name_bytes))

    logger.debug(
        "encoded %d symbols: blob %d bytes (raw %d)",
        len(records),
        blob_length,
        sum(len(record.name_bytes) + 1 for record in records),
    )
    return KallsymsTable(
        records=tuple(records),
        addresses=addresses,
        relative_base=relative_base,
        markers=tuple(compute_markers(names, config.marker_interval)),
        names=names,
        token_table=plan.table,
        name_order=name_order,
    )


__all__ = [
    "KallsymsTable",
    "MAX_ENCODED_NAME",
    "compute_markers",
    "encode_table",
    "length_prefix",
    "read_length_prefix",
    "token_index_offsets",
]
