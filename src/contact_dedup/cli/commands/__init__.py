"""
CLI command modules for contact_dedup.

Each command module defines a single Typer-compatible command function.
"""

from contact_dedup.cli.commands.merge import merge_command
from contact_dedup.cli.commands.scan import scan_command

__all__ = [
    "merge_command",
    "scan_command",
]
