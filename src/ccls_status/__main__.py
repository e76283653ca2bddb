"""Run the CLI with ``python -m ccls_status``."""

from .cli.main import app

app()
