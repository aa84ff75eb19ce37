# File: jdlschema/__main__.py
"""
jdlschema — Module entry point.

Allows running the compiler directly via::

    python -m jdlschema app.jdl -o schema.json

Delegates to ``jdlschema.cli.cli_main``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from jdlschema.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
