"""Terminal syntax highlighting for generated assembly.

Only used when the module is written to an interactive terminal; files and
pipes always receive plain text.
"""

from __future__ import annotations

from functools import lru_cache

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import GasLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"


def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, else the default style."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


@lru_cache(maxsize=8)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    return Terminal256Formatter(style=style)


def colorize_assembly(source: str, style: str = DEFAULT_STYLE) -> str:
    """Highlight GNU assembler ``source`` with ANSI escapes."""
    formatter = _formatter_for_style(normalize_style(style))
    return highlight(source, GasLexer(), formatter)


__all__ = ["DEFAULT_STYLE", "colorize_assembly", "normalize_style"]
