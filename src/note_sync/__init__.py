"""Data-access layer for synced notification notes."""

from note_sync.core.bucket.store import NoteBucket
from note_sync.core.document.note import Note
from note_sync.core.query.path_query import resolve
from note_sync.core.sync.schema import NoteSchema
from note_sync.protocols import BucketSchema, NotePersister

__all__ = ["BucketSchema", "Note", "NoteBucket", "NotePersister", "NoteSchema", "resolve"]
