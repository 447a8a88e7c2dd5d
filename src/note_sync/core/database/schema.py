"""SQLite schema creation and migration for the notes bucket."""

import sqlite3

SCHEMA_VERSION = 2

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS notes (
    key TEXT PRIMARY KEY,
    document TEXT NOT NULL,
    timestamp INTEGER,
    subject TEXT NOT NULL DEFAULT '',
    subject_text TEXT NOT NULL DEFAULT '',
    snippet TEXT NOT NULL DEFAULT '',
    unread INTEGER NOT NULL DEFAULT 1,
    noticon TEXT NOT NULL DEFAULT '',
    icon TEXT NOT NULL DEFAULT '',
    saved_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_notes_timestamp ON notes(timestamp DESC);
CREATE INDEX IF NOT EXISTS idx_notes_unread ON notes(unread);

CREATE VIRTUAL TABLE IF NOT EXISTS notes_fts USING fts5(
    subject_text, snippet,
    content='notes',
    content_rowid='rowid',
    tokenize='porter unicode61'
);

CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

# The subject column holds HTML; FTS indexes the plain-text subject_text instead.
_FTS_TRIGGERS_SQL = """\
CREATE TRIGGER IF NOT EXISTS notes_ai AFTER INSERT ON notes BEGIN
    INSERT INTO notes_fts(rowid, subject_text, snippet)
    VALUES (new.rowid, new.subject_text, new.snippet);
END;

CREATE TRIGGER IF NOT EXISTS notes_ad AFTER DELETE ON notes BEGIN
    INSERT INTO notes_fts(notes_fts, rowid, subject_text, snippet)
    VALUES ('delete', old.rowid, old.subject_text, old.snippet);
END;

CREATE TRIGGER IF NOT EXISTS notes_au AFTER UPDATE ON notes BEGIN
    INSERT INTO notes_fts(notes_fts, rowid, subject_text, snippet)
    VALUES ('delete', old.rowid, old.subject_text, old.snippet);
    INSERT INTO notes_fts(rowid, subject_text, snippet)
    VALUES (new.rowid, new.subject_text, new.snippet);
END;
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables, indexes, and triggers."""
    conn.executescript(_SCHEMA_SQL)
    conn.executescript(_FTS_TRIGGERS_SQL)
    set_metadata(conn, "schema_version", str(SCHEMA_VERSION))


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """Return the current schema version, or None if metadata table doesn't exist."""
    try:
        row = conn.execute(
            "SELECT value FROM metadata WHERE key = 'schema_version'"
        ).fetchone()
    except sqlite3.OperationalError:
        return None
    return int(row[0]) if row else None


def migrate_schema(conn: sqlite3.Connection) -> None:
    """Create or migrate the database schema to the latest version."""
    version = get_schema_version(conn)
    if version is None:
        create_schema(conn)
    elif version < 2:
        _migrate_v1_to_v2(conn)


def _migrate_v1_to_v2(conn: sqlite3.Connection) -> None:
    """Move FTS from the HTML subject to a plain-text subject column.

    Existing rows get an empty subject_text until they are saved again.
    """
    conn.executescript(
        """\
        DROP TRIGGER IF EXISTS notes_ai;
        DROP TRIGGER IF EXISTS notes_ad;
        DROP TRIGGER IF EXISTS notes_au;
        DROP TABLE IF EXISTS notes_fts;
        ALTER TABLE notes ADD COLUMN subject_text TEXT NOT NULL DEFAULT '';
        """
    )
    create_schema(conn)
    conn.execute("INSERT INTO notes_fts(notes_fts) VALUES ('rebuild')")
    conn.commit()


def get_metadata(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute("SELECT value FROM metadata WHERE key = ?", (key,)).fetchone()
    return row[0] if row else None


def set_metadata(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
        (key, value),
    )
    conn.commit()
