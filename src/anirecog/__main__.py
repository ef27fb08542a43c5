"""Entry point for ``python -m anirecog``."""

from anirecog.cli.typer_app import app

if __name__ == "__main__":
    app()
