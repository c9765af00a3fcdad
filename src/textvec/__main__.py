"""Entry point for running textvec as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the textvec CLI application."""
    app()


if __name__ == "__main__":
    main()
