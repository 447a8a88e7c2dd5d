"""Bucket schema for notes: build, update in place, and index."""

from collections.abc import Callable
from typing import Any

from loguru import logger

from note_sync.config import BUCKET_NAME
from note_sync.core.document.note import Note
from note_sync.models.note import IndexEntry

TIMESTAMP_INDEX = "timestamp"
SUBJECT_INDEX = "subject"
SNIPPET_INDEX = "snippet"
UNREAD_INDEX = "unread"
NOTICON_INDEX = "noticon"
ICON_URL_INDEX = "icon"

INDEX_NAMES: tuple[str, ...] = (
    TIMESTAMP_INDEX,
    SUBJECT_INDEX,
    SNIPPET_INDEX,
    UNREAD_INDEX,
    NOTICON_INDEX,
    ICON_URL_INDEX,
)

Indexer = Callable[[Note], list[IndexEntry]]


def index_note(note: Note) -> list[IndexEntry]:
    """Compute the canonical index entries for a note.

    A timestamp that does not parse is left out, so the note sorts last
    when ordering by timestamp. The remaining entries are still produced.
    """
    entries: list[IndexEntry] = []
    try:
        entries.append(IndexEntry(TIMESTAMP_INDEX, note.get_timestamp()))
    except ValueError:
        logger.exception("Failed to index timestamp for note {}", note.id)

    entries.append(IndexEntry(SUBJECT_INDEX, note.get_formatted_subject().to_html()))
    entries.append(IndexEntry(SNIPPET_INDEX, note.get_comment_subject()))
    entries.append(IndexEntry(UNREAD_INDEX, note.is_unread()))
    entries.append(IndexEntry(NOTICON_INDEX, note.get_noticon_character()))
    entries.append(IndexEntry(ICON_URL_INDEX, note.get_icon_url()))
    return entries


class NoteSchema:
    """Schema the notes bucket uses to construct, refresh and index notes."""

    remote_name: str = BUCKET_NAME

    def __init__(self) -> None:
        self._indexers: list[Indexer] = []
        self.add_index(index_note)

    def add_index(self, indexer: Indexer) -> None:
        self._indexers.append(indexer)

    def build(self, key: str, properties: dict[str, Any]) -> Note:
        note = Note(properties)
        if note.id != key:
            logger.debug("Bucket key {!r} differs from note id {!r}", key, note.id)
        return note

    def update(self, obj: Note, properties: dict[str, Any]) -> None:
        obj.replace_document(properties)

    def index(self, obj: Note) -> list[IndexEntry]:
        entries: list[IndexEntry] = []
        for indexer in self._indexers:
            entries.extend(indexer(obj))
        return entries
