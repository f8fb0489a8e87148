"""
CLI package for contact_dedup.

Provides the Typer application entrypoint and shared CLI utilities.
"""

from contact_dedup.cli.app import app, main

__all__ = [
    "app",
    "main",
]
