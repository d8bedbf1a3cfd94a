"""rolegate command line interface."""

from rolegate.cli.main import app, main


__all__ = ["app", "main"]
