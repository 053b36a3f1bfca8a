"""Name compression and table encoding.

- greedy pair-merging token table construction
- length-prefixed compressed name blob with periodic markers
- address array and name-ordered index
"""

from __future__ import annotations

from .tokens import CompressionPlan, TOKEN_CODES, TokenTable, build_token_table
from .encoder import (
    KallsymsTable,
    MAX_ENCODED_NAME,
    compute_markers,
    encode_table,
    length_prefix,
    read_length_prefix,
    token_index_offsets,
)

__all__ = [
    "CompressionPlan",
    "TOKEN_CODES",
    "TokenTable",
    "build_token_table",
    "KallsymsTable",
    "MAX_ENCODED_NAME",
    "compute_markers",
    "encode_table",
    "length_prefix",
    "read_length_prefix",
    "token_index_offsets",
]
