"""End-to-end symbol table generation.

Listing lines go through parse, filter and sort, then compression, encoding,
rendering and a decode-back self-check. The finished text is returned only
when every stage succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .compress.encoder import encode_table
from .compress.tokens import build_token_table
from .config import DEFAULT_CONFIG, KallsymsConfig
from .emit.assembly import render_assembly
from .emit.reader import verify_assembly
from .listing.parser import parse_listing

logger = logging.getLogger(__name__)


def generate_kallsyms(lines: Iterable[str], config: KallsymsConfig = DEFAULT_CONFIG) -> str:
    """Compile listing ``lines`` into the assembly module text."""
    records = parse_listing(lines, config)
    plan = build_token_table([record.name_bytes for record in records])
    table = encode_table(records, config, plan)
    text = render_assembly(table, config)
    verify_assembly(text, records, config)
    logger.debug("generated table with %d symbols", table.count)
    return text


__all__ = ["generate_kallsyms"]
