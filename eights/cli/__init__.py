"""Command-line interface for Eights."""

from .main import app, main

__all__ = ["app", "main"]
