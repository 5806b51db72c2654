"""BadgeVault command-line interface."""

from badgevault.cli.typer_app import app, run

__all__ = ["app", "run"]
