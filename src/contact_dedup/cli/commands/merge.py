from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from contact_dedup.cli.utils import load_records, write_json
from contact_dedup.config import get_config
from contact_dedup.core.exceptions import MasterNotFoundError
from contact_dedup.merge.engine import NOTE_SEPARATOR, merge_records

console = Console()


def merge_command(
    records: Path = typer.Argument(..., exists=True, readable=True),
    master: str = typer.Option(
        ...,
        "--master",
        "-m",
        help="Id of the record that survives the merge",
    ),
    duplicate: Optional[List[str]] = typer.Option(
        None,
        "--duplicate",
        "-d",
        help="Id of a record to merge into the master (repeatable)",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Merge duplicates into a master record and print the reconciled record as JSON.
    """
    if not duplicate:
        console.print("[bold red]At least one --duplicate id is required[/bold red]")
        raise typer.Exit(code=2)

    contacts = load_records(records, verbose=verbose)
    separator = get_config().merge.get("note_separator", NOTE_SEPARATOR)

    try:
        merged = merge_records(contacts, master, duplicate, note_separator=separator)
    except MasterNotFoundError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)

    if verbose:
        console.log(f"Merged {len(duplicate)} record(s) into {master}")

    write_json(merged.to_dict(), out=out, pretty=pretty)
