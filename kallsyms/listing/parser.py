"""Parse ``nm -n -C`` style symbol listings.

Each line is ``<hex address> <type-char> <name>[ [<module>]]``. Demangled
names may contain spaces, so the name is everything after the type field
minus an optional trailing module annotation. Malformed lines raise
``ParseError``; the run never continues past a corrupt listing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..config import DEFAULT_CONFIG, KallsymsConfig
from ..errors import ParseError
from .filters import filter_symbols
from .types import UNDEFINED_TYPES, SymbolRecord, classify_type

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"[0-9A-Fa-f]+")
_MODULE_RE = re.compile(r"(?:^|\s+)\[([^\[\]\s]+)\]$")
# Surrogate escapes left by decoding input bytes that are not UTF-8.
_UNDECODABLE_RE = re.compile(r"[\udc80-\udcff]")


def _split_module(rest: str) -> tuple[str, str | None]:
    """Separate a trailing ``[module]`` annotation from the symbol name."""
    match = _MODULE_RE.search(rest)
    if match is None:
        return rest, None
    return rest[: match.start()], match.group(1)


def parse_line(
    line: str,
    line_number: int,
    config: KallsymsConfig = DEFAULT_CONFIG,
) -> SymbolRecord | None:
    """Parse one listing line.

    Returns ``None`` for blank lines and for undefined references, which nm
    prints without an address.
    """
    text = line.rstrip("\r\n")
    fields = text.split(None, 2)
    if not fields:
        return None
    if _UNDECODABLE_RE.search(text) is not None:
        raise ParseError(line_number, text, "line is not valid UTF-8")
    if len(fields) == 2 and fields[0] in UNDEFINED_TYPES:
        return None
    if len(fields) < 3:
        raise ParseError(line_number, text, "expected '<address> <type> <name>'")

    address_text, type_char, rest = fields
    if _HEX_RE.fullmatch(address_text) is None:
        raise ParseError(line_number, text, f"invalid address {address_text!r}")
    address = int(address_text, 16)
    if address > config.max_address:
        raise ParseError(
            line_number,
            text,
            f"address does not fit in {config.word_size} bytes",
        )
    if len(type_char) != 1:
        raise ParseError(line_number, text, f"invalid type {type_char!r}")

    name, module = _split_module(rest.rstrip())
    if not name:
        raise ParseError(line_number, text, "missing symbol name")
    if not name.isprintable():
        raise ParseError(line_number, text, "symbol name is not printable")

    return SymbolRecord(
        address=address,
        type_char=type_char,
        kind=classify_type(type_char),
        name=name,
        module=module,
        line_number=line_number,
    )


def read_symbols(
    lines: Iterable[str],
    config: KallsymsConfig = DEFAULT_CONFIG,
) -> list[SymbolRecord]:
    """Parse every line in listing order without filtering or sorting."""
    records: list[SymbolRecord] = []
    for line_number, line in enumerate(lines, start=1):
        record = parse_line(line, line_number, config)
        if record is not None:
            records.append(record)
    return records


def parse_listing(
    lines: Iterable[str],
    config: KallsymsConfig = DEFAULT_CONFIG,
) -> list[SymbolRecord]:
    """Parse, filter and stable-sort a symbol listing by address.

    Records sharing an address keep their listing order. Empty input yields
    an empty list.
    """
    records = read_symbols(lines, config)
    retained = filter_symbols(records, config)
    retained.sort(key=lambda record: record.address)
    logger.debug("parsed %d symbols, retained %d", len(records), len(retained))
    return retained


__all__ = ["parse_line", "parse_listing", "read_symbols"]
