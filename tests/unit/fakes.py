"""Fake implementations for testing notes without a bucket."""

from note_sync.core.document.note import Note


class FakePersister:
    """In-memory fake for NoteBucket's save capability.

    Records the id and document of every saved note for assertions.
    """

    def __init__(self) -> None:
        self.saved: list[tuple[str, dict]] = []

    def save(self, note: Note) -> None:
        """Record the note's id and a copy of its document."""
        self.saved.append((note.id, dict(note.diffable_value())))
