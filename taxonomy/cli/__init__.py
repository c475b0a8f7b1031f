#!/usr/bin/env python3
"""
Ideas Taxonomy CLI
------------------

Command-line interface for browsing taxonomy records and keeping their
relationships synchronized.

Command Groups:
    - Records: show, list, relate, delete, notation
    - Relationships: sync, resync, check

Usage:
    # Browse
    taxonomy list ideas
    taxonomy show story 23

    # Link a story to ideas 5 and 7 (mirrors onto both ideas)
    taxonomy relate story 23 ideas 5 7

    # Repair and audit
    taxonomy resync
    taxonomy check

    # Delete and remove every back-reference
    taxonomy delete idea 5
"""
from __future__ import annotations

import click
from pathlib import Path
from typing import Optional

from taxonomy.core.paths import CONTENT_DIR, CONTENT_DIR_ENV
from taxonomy.core.cli import setup_logger


@click.group()
@click.option(
    "--content-dir",
    type=click.Path(file_okay=False),
    default=str(CONTENT_DIR),
    envvar=CONTENT_DIR_ENV,
    help="Content root holding the _ideas, _stories, ... collections",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=None,
    help="Directory for log files (default: <content-dir>/logs)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, content_dir: str, log_dir: Optional[str], verbose: bool) -> None:
    """Ideas Taxonomy relationship tools"""
    from taxonomy.editor import RecordEditor
    from taxonomy.store.markdown import MarkdownStore

    content_path = Path(content_dir)
    log_path = Path(log_dir) if log_dir else content_path / "logs"

    ctx.ensure_object(dict)
    ctx.obj["content_dir"] = content_path
    ctx.obj["log_dir"] = log_path
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(log_path, "taxonomy", verbose=verbose)
    ctx.obj["store"] = MarkdownStore(content_path, ctx.obj["logger"])
    ctx.obj["editor"] = RecordEditor(ctx.obj["store"], ctx.obj["logger"])


# Import and register commands from submodules
from .records import show, list_records, relate, delete, notation
from .relationships import sync, resync, check

# Register commands
cli.add_command(show)
cli.add_command(list_records)
cli.add_command(relate)
cli.add_command(delete)
cli.add_command(notation)
cli.add_command(sync)
cli.add_command(resync)
cli.add_command(check)


if __name__ == "__main__":
    cli(obj={})
