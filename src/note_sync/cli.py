"""CLI for the notes bucket (import, list, search, show, read, reply)."""

import json
import sqlite3
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from note_sync.config import DB_FILENAME, resolve_data_directory
from note_sync.core.bucket.store import NoteBucket, NoteRow
from note_sync.core.database.schema import migrate_schema
from note_sync.core.document.note import Note
from note_sync.core.importer.loader import import_notes_file
from note_sync.logging_config import configure_logging
from note_sync.models.note import NoteTimeGroup

app = typer.Typer(help="Notes bucket: import, browse and act on synced notifications.")

_GROUP_TITLES = {
    NoteTimeGroup.TODAY: "Today",
    NoteTimeGroup.YESTERDAY: "Yesterday",
    NoteTimeGroup.OLDER_TWO_DAYS: "Older than two days",
    NoteTimeGroup.OLDER_WEEK: "Older than a week",
    NoteTimeGroup.OLDER_MONTH: "Older than a month",
}

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Bucket database directory"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_db(data_dir: Path | None, *, create: bool = False) -> sqlite3.Connection:
    """Open the bucket database, raising if it doesn't exist and create is False."""
    dst = data_dir or resolve_data_directory()
    db_path = dst / DB_FILENAME
    if not create and not db_path.exists():
        logger.error("Bucket database not found: {}. Run 'import' first.", db_path)
        raise typer.Exit(1)
    dst.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    migrate_schema(conn)
    return conn


def _get_note(bucket: NoteBucket, key: str) -> Note:
    note = bucket.get(key)
    if note is None:
        typer.echo(f"Note '{key}' not found.")
        raise typer.Exit(1)
    return note


@app.command(name="import")
def import_cmd(
    source: Path = typer.Argument(..., help="JSON file with notes"),
    data_dir: DataDirOption = None,
) -> None:
    """Import notes from a JSON file into the bucket."""
    if not source.exists():
        logger.error("Source file not found: {}", source)
        raise typer.Exit(1)

    conn = _open_db(data_dir, create=True)
    try:
        bucket = NoteBucket(conn)
        try:
            stats = import_notes_file(bucket, conn, source)
        except ValueError as e:
            logger.error("Cannot import {}: {}", source, e)
            raise typer.Exit(1) from e
        typer.echo(
            f"Imported {stats.built} new, {stats.updated} updated, "
            f"{stats.unchanged} unchanged, skipped {stats.skipped}"
        )
    finally:
        conn.close()


def _row_to_dict(row: NoteRow) -> dict[str, Any]:
    return {
        "key": row.key,
        "timestamp": row.timestamp,
        "subject": row.subject,
        "snippet": row.snippet,
        "unread": row.unread,
        "noticon": row.noticon,
        "icon": row.icon,
    }


@app.command(name="list")
def list_cmd(
    unread: bool = typer.Option(False, "--unread", "-u", help="Only unread notes"),
    limit: int = typer.Option(20, "--limit", "-n", help="Max results"),
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List notes, newest first, grouped by age."""
    conn = _open_db(data_dir)
    try:
        bucket = NoteBucket(conn)
        rows = bucket.query(unread_only=unread, limit=limit)

        if output_json:
            data = {"results": [_row_to_dict(r) for r in rows], "count": len(rows)}
            typer.echo(json.dumps(data, indent=2))
            return

        current_group: NoteTimeGroup | None = None
        for row in rows:
            if row.timestamp is not None:
                group = Note.get_time_group_for_timestamp(row.timestamp)
                if group != current_group:
                    typer.echo(f"{_GROUP_TITLES[group]}:")
                    current_group = group
            marker = "*" if row.unread else " "
            typer.echo(f"  {marker} [{row.key}] {row.subject[:80]}")
            if row.snippet:
                typer.echo(f"      {row.snippet[:80]}")
    finally:
        conn.close()


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    unread: bool = typer.Option(False, "--unread", "-u", help="Only unread notes"),
    limit: int = typer.Option(10, "--limit", "-n", help="Max results"),
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Search note subjects and snippets."""
    conn = _open_db(data_dir)
    try:
        bucket = NoteBucket(conn)
        notes, total = bucket.search(query, unread_only=unread, limit=limit)

        if output_json:
            data = {
                "results": [
                    {
                        "key": n.bucket_key,
                        "title": n.get_title(),
                        "subject": n.get_formatted_subject().text,
                        "snippet": n.get_comment_subject(),
                    }
                    for n in notes
                ],
                "total": total,
            }
            typer.echo(json.dumps(data, indent=2))
            return

        typer.echo(f"Found {total} results (showing {len(notes)}):\n")
        for n in notes:
            typer.echo(f"  [{n.bucket_key}] {n.get_formatted_subject().text[:80]}")
            if n.get_comment_subject():
                typer.echo(f"    {n.get_comment_subject()[:60]}")
            typer.echo()
    finally:
        conn.close()


@app.command()
def show(
    key: str = typer.Argument(..., help="Note key"),
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show a note with its comment status and enabled actions."""
    conn = _open_db(data_dir)
    try:
        note = _get_note(NoteBucket(conn), key)
        actions = sorted(a.name for a in note.get_enabled_actions())
        data: dict[str, Any] = {
            "key": note.bucket_key,
            "type": note.get_type(),
            "title": note.get_title(),
            "subject": note.get_formatted_subject().text,
            "unread": note.is_unread(),
            "comment_status": str(note.get_comment_status()),
            "actions": actions,
            "liked": note.has_liked_comment(),
        }
        if note.is_comment_type():
            comment = note.build_comment()
            data["comment"] = {
                "post_id": comment.post_id,
                "comment_id": comment.comment_id,
                "author": comment.author_name,
                "author_url": comment.author_url,
                "published": comment.published,
                "text": comment.text,
                "status": str(comment.status),
            }

        if output_json:
            typer.echo(json.dumps(data, indent=2))
            return

        typer.echo(f"{data['subject']}  [{data['type']}]")
        typer.echo(f"  unread={data['unread']}  status={data['comment_status']}")
        typer.echo(f"  actions: {', '.join(actions) or '(none)'}")
        if "comment" in data:
            typer.echo(f"  {data['comment']['author']}: {data['comment']['text'][:120]}")
    finally:
        conn.close()


@app.command()
def read(
    key: str = typer.Argument(..., help="Note key"),
    data_dir: DataDirOption = None,
) -> None:
    """Mark a note as read."""
    conn = _open_db(data_dir)
    try:
        note = _get_note(NoteBucket(conn), key)
        note.mark_as_read()
        typer.echo(f"Note {key} marked as read.")
    finally:
        conn.close()


@app.command()
def reply(
    key: str = typer.Argument(..., help="Note key"),
    content: str = typer.Argument(..., help="Reply text"),
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Print the REST target a reply to this note would be sent to."""
    conn = _open_db(data_dir)
    try:
        r = _get_note(NoteBucket(conn), key).build_reply(content)
        if output_json:
            typer.echo(json.dumps({"rest_path": r.rest_path, "content": r.content}, indent=2))
        else:
            typer.echo(f"POST {r.rest_path}")
            typer.echo(f"  {r.content}")
    finally:
        conn.close()
