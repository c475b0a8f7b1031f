"""
Record Commands
---------------

Commands for browsing and editing taxonomy records.

Commands:
    - show: Show a record and its related items
    - list: List every record of a kind
    - relate: Replace one relation field and mirror it
    - delete: Delete a record (removing back-references by default)
    - notation: Format or parse an update notation

KIND accepts a singular or plural kind name (idea, ideas, story, ...).
"""
from __future__ import annotations

import click
from typing import Optional, Tuple

from taxonomy.core.exceptions import (
    PartialSyncError,
    TaxonomyError,
    UnknownEntityKindError,
)
from taxonomy.core.logging_manager import TaxonomyLogger, handle_cli_error
from taxonomy.editor import RecordEditor
from taxonomy.models.kinds import EntityKind
from taxonomy.relations.identifiers import format_notation, parse_notation
from taxonomy.relations.projector import record_heading, related_items


def parse_kind(ctx: click.Context, param: click.Parameter, value: str) -> EntityKind:
    """Click callback turning a KIND argument into an EntityKind."""
    try:
        return EntityKind.parse(value)
    except UnknownEntityKindError as e:
        raise click.BadParameter(str(e)) from e


def echo_partial_sync(error: PartialSyncError) -> None:
    """Print each failed mirror write of a partial sync."""
    if error.result is None:
        return
    for write in error.result.writes:
        click.echo(f"  ✓ {write.action} {write.kind.value} {write.identifier} ({write.field})")
    for failure in error.result.failures:
        target = f"{failure.kind.value} {failure.identifier or '*'}"
        click.echo(f"  ✗ {target} ({failure.field}): {failure.error}", err=True)


@click.command()
@click.argument("kind", callback=parse_kind)
@click.argument("identifier")
@click.pass_context
def show(ctx: click.Context, kind: EntityKind, identifier: str) -> None:
    """
    Show a record and everything related to it.

    Related items are grouped by kind; ids that point at missing records
    are shown bare.
    """
    store = ctx.obj["store"]

    try:
        record = store.get(kind, identifier)
        groups = related_items(store, kind, record)
    except TaxonomyError as e:
        handle_cli_error(ctx, e, "show", {"kind": kind.value, "id": identifier})
        return

    title, subtitle = record_heading(kind, record)
    click.echo(f"📄 {title}")
    if subtitle:
        click.echo(f"   {subtitle}")

    if not groups:
        click.echo("\nNo relationships documented for this record yet.")
        return

    for group in groups:
        click.echo(f"\n{group.heading}")
        for item in group.items:
            click.echo(f"  • {item}")


@click.command("list")
@click.argument("kind", callback=parse_kind)
@click.pass_context
def list_records(ctx: click.Context, kind: EntityKind) -> None:
    """List every record of a kind."""
    store = ctx.obj["store"]

    try:
        records = store.list_all(kind)
    except TaxonomyError as e:
        handle_cli_error(ctx, e, "list", {"kind": kind.value})
        return

    if not records:
        click.echo(f"No {kind.plural} found")
        return

    for record in records:
        title, subtitle = record_heading(kind, record)
        click.echo(f"{title} - {subtitle}" if subtitle else title)
    click.echo(f"\n{len(records)} {kind.plural}")


@click.command()
@click.argument("kind", callback=parse_kind)
@click.argument("identifier")
@click.argument("field")
@click.argument("values", nargs=-1)
@click.pass_context
def relate(
    ctx: click.Context,
    kind: EntityKind,
    identifier: str,
    field: str,
    values: Tuple[str, ...],
) -> None:
    """
    Replace one relation field of a record and mirror it.

    FIELD is a relation field (related_ideas) or a kind name (ideas).
    Passing no VALUES clears the field.

    Examples:
        taxonomy relate story 23 ideas 5 7
        taxonomy relate figure 3 related_stories 5.23
    """
    editor: RecordEditor = ctx.obj["editor"]
    field_name = _relation_field(field)

    try:
        result = editor.set_relations(kind, identifier, field_name, list(values))
    except PartialSyncError as e:
        echo_partial_sync(e)
        handle_cli_error(ctx, e, "relate", {"kind": kind.value, "id": identifier})
        return
    except TaxonomyError as e:
        handle_cli_error(ctx, e, "relate", {"kind": kind.value, "id": identifier})
        return

    click.echo(f"✅ Updated {field_name} on {kind.value} {identifier}")
    click.echo(f"   {result.summary()}")


@click.command()
@click.argument("kind", callback=parse_kind)
@click.argument("identifier")
@click.option(
    "--cascade/--no-cascade",
    default=True,
    show_default=True,
    help="Remove the record's back-references from related records first",
)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(
    ctx: click.Context, kind: EntityKind, identifier: str, cascade: bool, yes: bool
) -> None:
    """Delete a record."""
    editor: RecordEditor = ctx.obj["editor"]
    logger: TaxonomyLogger = ctx.obj["logger"]

    if not yes:
        click.confirm(f"Delete {kind.value} {identifier}?", abort=True)

    try:
        result = editor.delete(kind, identifier, cascade=cascade)
    except PartialSyncError as e:
        click.echo("⚠️  Some back-references could not be removed; record kept", err=True)
        echo_partial_sync(e)
        handle_cli_error(ctx, e, "delete", {"kind": kind.value, "id": identifier})
        return
    except TaxonomyError as e:
        handle_cli_error(ctx, e, "delete", {"kind": kind.value, "id": identifier})
        return

    logger.log_info(f"Deleted {kind.value} {identifier}", {"cascade": cascade})
    click.echo(f"🗑️  Deleted {kind.value} {identifier}")
    if result is not None and result.writes:
        click.echo(f"   Removed back-references from {len(result.writes)} records")


@click.command()
@click.argument("text", required=False)
@click.option("--sprint", "sprint_id", default=None, help="Sprint id (YYSS)")
@click.option("--idea", "idea_number", type=int, default=None, help="Idea number")
@click.option("--story", "story_number", type=int, default=None, help="Story number")
def notation(
    text: Optional[str],
    sprint_id: Optional[str],
    idea_number: Optional[int],
    story_number: Optional[int],
) -> None:
    """
    Format an update notation, or parse TEXT into its components.

    Examples:
        taxonomy notation --sprint 2609 --idea 5 --story 23   # 2609.5.23
        taxonomy notation i5                                  # idea_number: 5
    """
    if text:
        components = parse_notation(text)
        if not components:
            raise click.ClickException(f"Not a valid notation: {text}")
        for key, value in components.items():
            click.echo(f"{key}: {value}")
        return

    formatted = format_notation(sprint_id, idea_number, story_number)
    if not formatted:
        raise click.UsageError("Give TEXT to parse or at least --idea or --story")
    click.echo(formatted)


def _relation_field(field: str) -> str:
    if field.startswith("related_"):
        return field
    try:
        return EntityKind.parse(field).relation_field
    except UnknownEntityKindError as e:
        raise click.BadParameter(str(e), param_hint="FIELD") from e
