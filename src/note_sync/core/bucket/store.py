"""SQLite-backed bucket holding notes and their index entries."""

import json
import sqlite3
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from loguru import logger

from note_sync.core.document.note import Note
from note_sync.core.search.searcher import search_note_keys
from note_sync.core.sync.schema import INDEX_NAMES, NoteSchema


class ApplyResult(Enum):
    """What apply_remote did with an incoming document."""

    BUILT = auto()
    UPDATED = auto()
    UNCHANGED = auto()


@dataclass(frozen=True)
class NoteRow:
    """A stored note's index columns, as read back from the bucket."""

    key: str
    timestamp: int | None
    subject: str
    snippet: str
    unread: bool
    noticon: str
    icon: str


_INDEX_COLUMNS = ", ".join(INDEX_NAMES)
# Stored columns: the index entries plus the plain-text subject that FTS indexes.
_ROW_COLUMNS = "timestamp, subject, subject_text, snippet, unread, noticon, icon"


class NoteBucket:
    """Notes keyed by id, persisted with one column per index entry.

    Objects handed out by ``get`` are kept in memory, so a later remote
    update mutates the same Note instance observers already hold.
    """

    def __init__(self, conn: sqlite3.Connection, schema: NoteSchema | None = None) -> None:
        self._conn = conn
        self.schema = schema or NoteSchema()
        self._objects: dict[str, Note] = {}
        # id(note) -> bucket key the note was attached under
        self._keys: dict[int, str] = {}

    def _attach(self, key: str, note: Note) -> Note:
        note.persister = self
        self._objects[key] = note
        self._keys[id(note)] = key
        return note

    def apply_remote(self, key: str, properties: dict[str, Any]) -> ApplyResult:
        """Build or update the note for ``key`` from remote JSON, then save it."""
        note = self.get(key)
        if note is None:
            note = self._attach(key, self.schema.build(key, properties))
            result = ApplyResult.BUILT
        elif note.diffable_value() == properties:
            return ApplyResult.UNCHANGED
        else:
            self.schema.update(note, properties)
            result = ApplyResult.UPDATED

        self._write(key, note)
        return result

    def save(self, note: Note) -> None:
        """Persist a note's current document and recompute its index.

        The note is written under the key it was attached with, which may
        differ from its document id.
        """
        key = self._keys.get(id(note))
        if key is None:
            key = note.bucket_key
            self._objects.setdefault(key, note)
        self._write(key, note)

    def _write(self, key: str, note: Note) -> None:
        values: dict[str, Any] = dict.fromkeys(INDEX_NAMES)
        for entry in self.schema.index(note):
            if entry.name in values:
                values[entry.name] = entry.value

        row = (
            key,
            json.dumps(note.diffable_value(), sort_keys=True),
            values["timestamp"],
            values["subject"] or "",
            note.get_formatted_subject().text,
            values["snippet"] or "",
            1 if values["unread"] is None else int(values["unread"]),
            values["noticon"] or "",
            values["icon"] or "",
            int(time.time()),
        )
        try:
            self._conn.execute(
                f"""INSERT INTO notes (key, document, {_ROW_COLUMNS}, saved_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        document = excluded.document,
                        timestamp = excluded.timestamp,
                        subject = excluded.subject,
                        subject_text = excluded.subject_text,
                        snippet = excluded.snippet,
                        unread = excluded.unread,
                        noticon = excluded.noticon,
                        icon = excluded.icon,
                        saved_at = excluded.saved_at""",
                row,
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise
        logger.debug("Saved note {}", key)

    def get(self, key: str) -> Note | None:
        """Return the note for ``key``, loading it from storage if needed."""
        note = self._objects.get(key)
        if note is not None:
            return note

        row = self._conn.execute("SELECT document FROM notes WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return self._attach(key, self.schema.build(key, json.loads(row[0])))

    def remove(self, key: str) -> None:
        note = self._objects.pop(key, None)
        if note is not None:
            self._keys.pop(id(note), None)
        self._conn.execute("DELETE FROM notes WHERE key = ?", (key,))
        self._conn.commit()

    def count(self, *, unread_only: bool = False) -> int:
        sql = "SELECT COUNT(*) FROM notes"
        if unread_only:
            sql += " WHERE unread = 1"
        return int(self._conn.execute(sql).fetchone()[0])

    def query(self, *, unread_only: bool = False, limit: int = 50, offset: int = 0) -> list[NoteRow]:
        """Stored notes, newest first. Notes without a timestamp come last."""
        sql = f"SELECT key, {_INDEX_COLUMNS} FROM notes "
        if unread_only:
            sql += "WHERE unread = 1 "
        sql += "ORDER BY timestamp IS NULL, timestamp DESC, key LIMIT ? OFFSET ?"
        rows = self._conn.execute(sql, (limit, offset)).fetchall()
        return [
            NoteRow(
                key=r[0], timestamp=r[1], subject=r[2], snippet=r[3],
                unread=bool(r[4]), noticon=r[5], icon=r[6],
            )
            for r in rows
        ]

    def search(
        self, text: str, *, unread_only: bool = False, limit: int = 20, offset: int = 0
    ) -> tuple[list[Note], int]:
        """Full-text search over subjects and snippets.

        Returns:
            Tuple of (matching notes, total_count).
        """
        keys, total = search_note_keys(
            self._conn, query=text, unread_only=unread_only, limit=limit, offset=offset
        )
        notes = [note for key in keys if (note := self.get(key)) is not None]
        return notes, total
