# File: classgen/__main__.py
"""
ClassGen - Module entry point.

Allows running the generator directly via::

    python -m classgen -m Model.xml -o ./Entity

This module simply delegates to the CLI entry point defined in ``classgen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from classgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
