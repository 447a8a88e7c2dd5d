"""Tests for database schema."""

import sqlite3

from note_sync.core.database.schema import (
    SCHEMA_VERSION,
    create_schema,
    get_metadata,
    get_schema_version,
    migrate_schema,
    set_metadata,
)


def test_create_schema_creates_notes_table_and_fts() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    tables = {
        row[0]
        for row in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()
    }
    assert "notes" in tables
    assert "notes_fts" in tables
    assert "metadata" in tables


def test_migrate_schema_on_empty_db_creates_schema_and_sets_version() -> None:
    conn = sqlite3.connect(":memory:")
    assert get_schema_version(conn) is None
    migrate_schema(conn)
    assert get_schema_version(conn) == SCHEMA_VERSION


def test_migrate_schema_is_idempotent() -> None:
    conn = sqlite3.connect(":memory:")
    migrate_schema(conn)
    migrate_schema(conn)
    assert get_schema_version(conn) == SCHEMA_VERSION


def test_metadata_roundtrip() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    assert get_metadata(conn, "missing") is None
    set_metadata(conn, "last_import_at", "123")
    assert get_metadata(conn, "last_import_at") == "123"


def test_fts_indexes_plain_text_subject_not_html() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    columns = [row[1] for row in conn.execute("PRAGMA table_info(notes_fts)").fetchall()]
    assert columns == ["subject_text", "snippet"]


def test_migrate_schema_from_v1_moves_fts_to_subject_text() -> None:
    conn = sqlite3.connect(":memory:")
    conn.executescript(
        """\
        CREATE TABLE notes (
            key TEXT PRIMARY KEY, document TEXT NOT NULL, timestamp INTEGER,
            subject TEXT NOT NULL DEFAULT '', snippet TEXT NOT NULL DEFAULT '',
            unread INTEGER NOT NULL DEFAULT 1, noticon TEXT NOT NULL DEFAULT '',
            icon TEXT NOT NULL DEFAULT '', saved_at INTEGER NOT NULL
        );
        CREATE VIRTUAL TABLE notes_fts USING fts5(
            subject, snippet, content='notes', content_rowid='rowid'
        );
        CREATE TABLE metadata (key TEXT PRIMARY KEY, value TEXT NOT NULL);
        INSERT INTO metadata VALUES ('schema_version', '1');
        INSERT INTO notes (key, document, subject, snippet, saved_at)
            VALUES ('1', '{}', '<a href="x">Hi</a>', 'hello there', 0);
        """
    )

    migrate_schema(conn)

    assert get_schema_version(conn) == SCHEMA_VERSION
    matches = conn.execute(
        "SELECT rowid FROM notes_fts WHERE notes_fts MATCH 'hello'"
    ).fetchall()
    assert len(matches) == 1
    assert conn.execute(
        "SELECT COUNT(*) FROM notes_fts WHERE notes_fts MATCH 'href'"
    ).fetchone()[0] == 0
