"""Module entrypoint for ``python -m kallsyms``.

All argument parsing and error reporting happen in ``kallsyms.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
