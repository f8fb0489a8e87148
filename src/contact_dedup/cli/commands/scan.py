from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import typer
from rich.console import Console
from rich.table import Table

from contact_dedup.cli.utils import build_context, load_records, write_json
from contact_dedup.core.exceptions import ScanExecutionError
from contact_dedup.core.pipeline import DuplicateScanPipeline
from contact_dedup.models import Confidence

console = Console()


def scan_command(
    records: Path = typer.Argument(..., exists=True, readable=True),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write groups as JSON to file instead of printing a table",
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
    Find duplicate groups in a JSON export of contact records.
    """
    contacts = load_records(records, verbose=verbose)
    ctx = build_context(input_path=records, output_path=out, verbose=verbose)

    if verbose:
        console.log("Scanning for duplicates")

    handle = DuplicateScanPipeline(ctx).submit(contacts)
    try:
        groups = handle.result()
    except ScanExecutionError as exc:
        console.print(f"[bold red]Scan failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if out:
        data = {
            "counts": {
                "records": len(contacts),
                "groups": len(groups),
                "high": sum(1 for g in groups if g.confidence is Confidence.HIGH),
                "medium": sum(1 for g in groups if g.confidence is Confidence.MEDIUM),
            },
            "groups": [g.to_dict() for g in groups],
        }
        write_json(data, out=out, pretty=pretty)
        if verbose:
            console.log(f"Wrote {len(groups)} groups to {out}")
        return

    names: Dict[str, str] = {c.id: c.display_name or c.id for c in contacts}

    table = Table(title=f"Duplicate groups ({len(groups)})")
    table.add_column("#", justify="right")
    table.add_column("Confidence", style="bold")
    table.add_column("Reason")
    table.add_column("Contacts")

    for i, group in enumerate(groups, start=1):
        table.add_row(
            str(i),
            group.confidence.value,
            group.reason,
            ", ".join(f"{names.get(cid, cid)} [{cid}]" for cid in group.contact_ids),
        )

    console.print(table)
