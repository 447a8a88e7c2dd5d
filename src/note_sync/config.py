"""Configuration constants for note-sync."""

from pathlib import Path

# Remote bucket name the notes are synced from.
BUCKET_NAME: str = "note20"

# Maximum character length for a comment preview
MAX_COMMENT_PREVIEW_LENGTH: int = 200

NOTE_UNKNOWN_TYPE: str = "unknown"
NOTE_COMMENT_TYPE: str = "comment"
NOTE_MATCHER_TYPE: str = "automattcher"

# JSON action keys in the last body item's "actions" object
ACTION_KEY_REPLY: str = "replyto-comment"
ACTION_KEY_APPROVE: str = "approve-comment"
ACTION_KEY_SPAM: str = "spam-comment"
ACTION_KEY_LIKE: str = "like-comment"

# Directory with the bucket database. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/note-sync").expanduser(),
    Path("~/.note-sync").expanduser(),
]

DEFAULT_DATA_DIR: Path = DATA_DIRECTORIES[0]

DB_FILENAME: str = "notes.db"


def resolve_data_directory() -> Path:
    """Return the first existing data directory, or the default one."""
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DEFAULT_DATA_DIR
