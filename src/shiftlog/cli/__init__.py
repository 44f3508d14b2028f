"""Command-line front end for shiftlog."""

from .main import app

__all__ = ["app"]
