"""Protocols for the sync bucket collaborators."""

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from note_sync.models.note import IndexEntry

if TYPE_CHECKING:
    from note_sync.core.document.note import Note

T = TypeVar("T")


@runtime_checkable
class NotePersister(Protocol):
    """Protocol for whatever stores a note after a local mutation."""

    def save(self, note: "Note") -> None:
        """Persist the note's current document."""
        ...


@runtime_checkable
class BucketSchema(Protocol[T]):
    """Protocol a sync bucket uses to build, update and index its objects."""

    remote_name: str

    def build(self, key: str, properties: dict[str, Any]) -> T:
        """Create a new object from remote JSON."""
        ...

    def update(self, obj: T, properties: dict[str, Any]) -> None:
        """Replace the object's document in place."""
        ...

    def index(self, obj: T) -> list[IndexEntry]:
        """Return the index entries used for bucket-level queries."""
        ...
