"""
timexpr CLI Package.

- app.py: the typer application and its single command
- utils.py: version, logging and literal helpers
"""

from timexpr.cli.app import app, main
from timexpr.cli.utils import get_version, version_callback

__all__ = [
    "app",
    "main",
    "get_version",
    "version_callback",
]
