"""Public package surface for kallsyms.

Exports ``main`` for programmatic CLI invocation and ``generate_kallsyms``
for in-process table generation. Stages live in ``listing``, ``compress``
and ``emit``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def generate_kallsyms(*args, **kwargs):
    """Lazily import the generator pipeline."""
    from .generator import generate_kallsyms as _generate

    return _generate(*args, **kwargs)


__all__ = ["generate_kallsyms", "main"]
