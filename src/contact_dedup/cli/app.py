from __future__ import annotations

import typer

from contact_dedup.cli.commands.merge import merge_command
from contact_dedup.cli.commands.scan import scan_command

app = typer.Typer(
    name="contact-dedup",
    help="Find and merge duplicate contacts",
    add_completion=False,
)

app.command("scan")(scan_command)
app.command("merge")(merge_command)


def main():
    app()


if __name__ == "__main__":
    main()
