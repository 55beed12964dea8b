"""Entry point for the plantree CLI.

Usage:
    python -m plantree.interfaces.cli.main

Or via installed entry point:
    plantree <command>
"""

from plantree.interfaces.cli import app


def main() -> None:
    """Run the plantree CLI application."""
    app()


if __name__ == "__main__":
    main()
