"""Allow ``python -m badgevault``."""

from badgevault.cli.typer_app import run

if __name__ == "__main__":
    run()
