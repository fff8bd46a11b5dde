"""Allow running as ``python -m dropmodules``."""

from dropmodules.cli import app

app()
