"""Greedy token-table construction for symbol-name compression.

Every byte value that occurs in some name keeps a code equal to itself. The
remaining codes are handed out, lowest first, to merged tokens: on each step
the adjacent token pair with the most non-overlapping occurrences across all
names becomes a new single-byte code and every left-to-right occurrence is
replaced. Equal counts resolve to the lexicographically smallest
``(left, right)`` code pair, so the same names always yield the same table.

A merge is only taken when its occurrence count exceeds the length of its
expansion; below that the token table grows by at least as much as the blob
shrinks.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TOKEN_CODES = 256

_RUN_RE = re.compile(rb"(.)\1{2,}", re.DOTALL)


@dataclass(frozen=True)
class TokenTable:
    """Code-to-expansion mapping plus the ordered merges that built it.

    ``expansions[code]`` is empty for unused codes.
    """

    expansions: tuple[bytes, ...]
    merges: tuple[tuple[bytes, int], ...] = ()

    def encode(self, name: bytes) -> bytes:
        """Re-encode raw name bytes with this table's merges."""
        for code in name:
            if self.expansions[code] != bytes((code,)):
                raise ValueError(f"byte 0x{code:02x} has no raw token")
        for pair, code in self.merges:
            if pair in name:
                name = name.replace(pair, bytes((code,)))
        return name

    def decode(self, codes: Iterable[int]) -> bytes:
        return b"".join(self.expansions[code] for code in codes)

    @property
    def used_codes(self) -> int:
        return sum(1 for expansion in self.expansions if expansion)


@dataclass(frozen=True)
class CompressionPlan:
    """Token table together with every name already encoded by it."""

    table: TokenTable
    encoded_names: tuple[bytes, ...]


def _pair_counts(name: bytes) -> Counter[bytes]:
    """Non-overlapping pair counts, as ``bytes.replace`` will rewrite them.

    Overlap is only possible inside runs of one repeated byte: a run of
    length ``n`` holds ``n - 1`` overlapping ``cc`` pairs but only ``n // 2``
    replaceable ones.
    """
    counts = Counter(map(bytes, zip(name, name[1:])))
    for run in _RUN_RE.finditer(name):
        length = run.end() - run.start()
        counts[run.group(1) * 2] -= length - 1 - length // 2
    return counts


def _best_pair(counts: Counter[bytes], expansions: Sequence[bytes]) -> bytes | None:
    """Most frequent profitable pair; ties go to the smallest pair."""
    best: bytes | None = None
    best_count = 0
    for pair, count in counts.items():
        if count <= len(expansions[pair[0]]) + len(expansions[pair[1]]):
            continue
        if count > best_count or (count == best_count and best is not None and pair < best):
            best = pair
            best_count = count
    return best


def build_token_table(names: Sequence[bytes]) -> CompressionPlan:
    """Compute the token table for ``names`` and encode them with it."""
    expansions: list[bytes] = [b""] * TOKEN_CODES
    for name in names:
        for code in set(name):
            expansions[code] = bytes((code,))
    free_codes = [code for code in range(TOKEN_CODES) if not expansions[code]]

    encoded = list(names)
    counts: Counter[bytes] = Counter()
    for name in encoded:
        counts.update(_pair_counts(name))

    merges: list[tuple[bytes, int]] = []
    for code in free_codes:
        pair = _best_pair(counts, expansions)
        if pair is None:
            break
        expansions[code] = expansions[pair[0]] + expansions[pair[1]]
        replacement = bytes((code,))
        removed: Counter[bytes] = Counter()
        added: Counter[bytes] = Counter()
        for idx, name in enumerate(encoded):
            if pair not in name:
                continue
            removed.update(_pair_counts(name))
            name = name.replace(pair, replacement)
            added.update(_pair_counts(name))
            encoded[idx] = name
        counts.subtract(removed)
        counts.update(added)
        for stale in removed:
            if counts[stale] <= 0:
                del counts[stale]
        merges.append((pair, code))

    logger.debug(
        "token table: %d merges, %d of %d codes used",
        len(merges),
        sum(1 for expansion in expansions if expansion),
        TOKEN_CODES,
    )
    table = TokenTable(expansions=tuple(expansions), merges=tuple(merges))
    return CompressionPlan(table=table, encoded_names=tuple(encoded))


__all__ = ["CompressionPlan", "TOKEN_CODES", "TokenTable", "build_token_table"]
