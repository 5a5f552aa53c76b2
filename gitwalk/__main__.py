"""Entry point for running gitwalk as a module."""

from gitwalk.cli import app


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
