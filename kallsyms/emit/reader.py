"""Read an emitted symbol-table module back and decode it.

``SymbolTableImage`` mirrors what the kernel's lookup code does with the
linked table: skip-decode names from the nearest marker, binary-search the
address array and expand token codes through the token index. The generator
uses it to check its own output before anything is written.
"""

from __future__ import annotations

import bisect
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from ..compress.encoder import read_length_prefix
from ..config import DEFAULT_CONFIG, KallsymsConfig
from ..errors import VerificationError
from ..listing.types import SymbolRecord
from .layout import STRING_DIRECTIVE, WIDTH_BY_DIRECTIVE, table_layout

_COMMENT_RE = re.compile(r"/\*.*?\*/")
_LABEL_RE = re.compile(r"^([A-Za-z_.$][\w.$]*):$")
_OCTAL_RE = re.compile(r"\\([0-7]{3})|\\(.)")


def unescape_string(literal: str) -> bytes:
    """Inverse of ``escape_string`` for a quoted ``.asciz`` operand."""
    if len(literal) < 2 or literal[0] != '"' or literal[-1] != '"':
        raise VerificationError(f"malformed string operand: {literal}")

    def replace(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            return chr(int(match.group(1), 8))
        return match.group(2)

    return _OCTAL_RE.sub(replace, literal[1:-1]).encode("latin-1")


def parse_sections(text: str) -> dict[str, list]:
    """Collect the operands under each label.

    Numeric directives contribute ints; ``.asciz`` lines contribute bytes.
    """
    sections: dict[str, list] = {}
    current: list | None = None
    for raw_line in text.splitlines():
        line = _COMMENT_RE.sub("", raw_line).strip()
        if not line:
            continue
        label = _LABEL_RE.match(line)
        if label is not None:
            current = sections.setdefault(label.group(1), [])
            continue
        directive, _sep, operands = line.partition(" ")
        if directive in WIDTH_BY_DIRECTIVE:
            if current is None:
                raise VerificationError(f"data outside a label: {raw_line}")
            current.extend(int(value, 0) for value in operands.split(","))
        elif directive == STRING_DIRECTIVE:
            if current is None:
                raise VerificationError(f"data outside a label: {raw_line}")
            current.append(unescape_string(operands.strip()))
    return sections


@dataclass(frozen=True)
class SymbolTableImage:
    """Decoded view of one emitted table."""

    count: int
    addresses: tuple[int, ...]
    relative_base: int | None
    markers: tuple[int, ...]
    blob: bytes
    token_table: bytes
    token_index: tuple[int, ...]
    name_order: tuple[int, ...]
    marker_interval: int

    @classmethod
    def from_assembly(cls, text: str, config: KallsymsConfig = DEFAULT_CONFIG) -> "SymbolTableImage":
        sections = parse_sections(text)
        values: dict[str, list] = {}
        for part in table_layout(config):
            if part.label not in sections:
                raise VerificationError(f"missing label {part.label}")
            values[part.name] = sections[part.label]

        if len(values["num"]) != 1:
            raise VerificationError("symbol count must be a single value")
        relative_base = None
        if config.base_relative:
            relative_base = values["relative_base"][0]
        return cls(
            count=values["num"][0],
            addresses=tuple(values["address"]),
            relative_base=relative_base,
            markers=tuple(values["markers"]),
            blob=bytes(values["names"]),
            token_table=b"".join(expansion + b"\0" for expansion in values["token_table"]),
            token_index=tuple(values["token_index"]),
            name_order=tuple(values.get("seqs_of_names", ())),
            marker_interval=config.marker_interval,
        )

    def address_at(self, index: int) -> int:
        if self.relative_base is None:
            return self.addresses[index]
        return self.relative_base + self.addresses[index]

    def expansion(self, code: int) -> bytes:
        start = self.token_index[code]
        return self.token_table[start : self.token_table.index(0, start)]

    def entry_offset(self, index: int) -> int:
        """Blob offset of entry ``index``, skipping forward from its marker."""
        if not 0 <= index < self.count:
            raise IndexError(index)
        offset = self.markers[index // self.marker_interval]
        for _ in range(index % self.marker_interval):
            length, prefix = read_length_prefix(self.blob, offset)
            offset += prefix + length
        return offset

    def _decode_at(self, offset: int) -> tuple[bytes, int]:
        length, prefix = read_length_prefix(self.blob, offset)
        start = offset + prefix
        codes = self.blob[start : start + length]
        return b"".join(self.expansion(code) for code in codes), start + length

    def name_at(self, index: int) -> str:
        name, _end = self._decode_at(self.entry_offset(index))
        return name.decode("utf-8")

    def iter_names(self) -> Iterator[str]:
        """Decode every entry sequentially from the start of the blob."""
        offset = 0
        for _ in range(self.count):
            name, offset = self._decode_at(offset)
            yield name.decode("utf-8")

    def lookup(self, address: int) -> tuple[int, str, int] | None:
        """Resolve ``address`` to ``(index, name, offset within symbol)``.

        Aliases at the same address resolve to the first one listed.
        """
        if self.count == 0:
            return None
        position = bisect.bisect_right([self.address_at(idx) for idx in range(self.count)], address)
        if position == 0:
            return None
        index = position - 1
        start = self.address_at(index)
        while index > 0 and self.address_at(index - 1) == start:
            index -= 1
        return index, self.name_at(index), address - start

    def lookup_name(self, name: str) -> int | None:
        """Index of the first symbol called ``name``, via the name index."""
        target = name.encode("utf-8")
        low, high = 0, len(self.name_order)
        while low < high:
            middle = (low + high) // 2
            candidate = self.name_at(self.name_order[middle]).encode("utf-8")
            if candidate < target:
                low = middle + 1
            else:
                high = middle
        if low < len(self.name_order) and self.name_at(self.name_order[low]) == name:
            return self.name_order[low]
        return None


def verify_assembly(
    text: str,
    records: Sequence[SymbolRecord],
    config: KallsymsConfig = DEFAULT_CONFIG,
) -> SymbolTableImage:
    """Check that ``text`` decodes back to ``records`` exactly."""
    image = SymbolTableImage.from_assembly(text, config)
    if image.count != len(records) or len(image.addresses) != len(records):
        raise VerificationError(f"table declares {image.count} symbols, expected {len(records)}")
    expected_markers = -(-len(records) // image.marker_interval)
    if len(image.markers) != expected_markers:
        raise VerificationError(f"expected {expected_markers} markers, found {len(image.markers)}")

    previous = -1
    offset = 0
    for index, record in enumerate(records):
        if index % image.marker_interval == 0 and image.markers[index // image.marker_interval] != offset:
            raise VerificationError(f"marker {index // image.marker_interval} does not match offset {offset}")
        address = image.address_at(index)
        if address != record.address:
            raise VerificationError(f"address mismatch at index {index}: 0x{address:x}")
        if address < previous:
            raise VerificationError(f"address array not sorted at index {index}")
        previous = address
        raw_name, offset = image._decode_at(offset)
        if raw_name != record.name_bytes:
            raise VerificationError(f"name mismatch at index {index}: {raw_name!r} != {record.name!r}")
    if offset != len(image.blob):
        raise VerificationError(f"name blob has {len(image.blob) - offset} trailing bytes")
    return image


__all__ = ["SymbolTableImage", "parse_sections", "unescape_string", "verify_assembly"]
