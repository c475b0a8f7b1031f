"""
Relationship Commands
---------------------

Commands for syncing and auditing relationships.

Commands:
    - sync: Re-mirror one record's relation fields
    - resync: Re-mirror every record (repairs the whole graph)
    - check: Report relationship consistency issues
"""
from __future__ import annotations

import click

from taxonomy.core.exceptions import PartialSyncError, TaxonomyError
from taxonomy.core.logging_manager import TaxonomyLogger, handle_cli_error
from taxonomy.editor import RecordEditor
from taxonomy.models.kinds import EntityKind
from taxonomy.validators.consistency import RelationshipConsistencyValidator

from .records import echo_partial_sync, parse_kind


@click.command()
@click.argument("kind", callback=parse_kind)
@click.argument("identifier")
@click.pass_context
def sync(ctx: click.Context, kind: EntityKind, identifier: str) -> None:
    """Mirror one stored record's relation fields onto its targets."""
    editor: RecordEditor = ctx.obj["editor"]

    try:
        record = editor.store.get(kind, identifier)
        result = editor.sync.sync(kind, record)
    except PartialSyncError as e:
        echo_partial_sync(e)
        handle_cli_error(ctx, e, "sync", {"kind": kind.value, "id": identifier})
        return
    except TaxonomyError as e:
        handle_cli_error(ctx, e, "sync", {"kind": kind.value, "id": identifier})
        return

    for write in result.writes:
        click.echo(f"  ✓ {write.action} {write.kind.value} {write.identifier} ({write.field})")
    if result.changed:
        click.echo(f"✅ {result.summary()}")
    else:
        click.echo(f"✅ Already in sync: {kind.value} {identifier}")


@click.command()
@click.pass_context
def resync(ctx: click.Context) -> None:
    """
    Re-sync every record to repair the relationship graph.

    Records are processed ideas first, then stories, sprints, notes,
    figures and updates; where two sides disagree, the earlier kind wins.
    """
    editor: RecordEditor = ctx.obj["editor"]
    logger: TaxonomyLogger = ctx.obj["logger"]

    click.echo("🔄 Resyncing all relationships...")

    try:
        stats = editor.resync_all()
    except TaxonomyError as e:
        handle_cli_error(ctx, e, "resync")
        return

    logger.log_operation("resync_complete", stats.to_dict())
    click.echo(f"\n✅ {stats.summary()}")
    if stats.errors:
        raise click.ClickException(f"{stats.errors} record(s) could not be fully synced")


@click.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """
    Check that every relationship is mirrored on both sides.

    Reports missing back-references, dangling and duplicate references,
    and empty relation lists.
    """
    store = ctx.obj["store"]
    logger: TaxonomyLogger = ctx.obj["logger"]

    click.echo("🔍 Checking relationship consistency...\n")

    try:
        report = RelationshipConsistencyValidator(store, logger).validate_all()
    except TaxonomyError as e:
        handle_cli_error(ctx, e, "check")
        return

    for issue in report.issues:
        icon = "❌" if issue.severity == "error" else "⚠️"
        click.echo(
            f"{icon} [{issue.check_type}] {issue.entity_type} {issue.entity_id}: {issue.message}"
        )
        if issue.suggestion:
            click.echo(f"   💡 {issue.suggestion}")

    if report.issues:
        click.echo()
    click.echo(
        f"Checked {report.records_checked} records: "
        f"{report.total_errors} errors, {report.total_warnings} warnings"
    )

    if report.has_errors:
        raise click.ClickException(f"Found {report.total_errors} consistency error(s)")
    click.echo("✅ All relationships are consistent")
