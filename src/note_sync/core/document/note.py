"""Note: a single synced notification wrapping its server JSON document."""

from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger

from note_sync.config import (
    ACTION_KEY_APPROVE,
    ACTION_KEY_LIKE,
    ACTION_KEY_REPLY,
    ACTION_KEY_SPAM,
    MAX_COMMENT_PREVIEW_LENGTH,
    NOTE_COMMENT_TYPE,
    NOTE_MATCHER_TYPE,
    NOTE_UNKNOWN_TYPE,
)
from note_sync.core.document.cache import DerivedFieldCache
from note_sync.core.document.formatting import format_subject
from note_sync.core.document.timeutil import (
    is_days_older_than,
    iso8601_to_timestamp,
    timestamp_to_iso8601,
)
from note_sync.core.query.path_query import resolve
from note_sync.models.note import (
    Comment,
    CommentStatus,
    EnabledAction,
    FormattedSubject,
    NoteTimeGroup,
    Reply,
)

if TYPE_CHECKING:
    from note_sync.protocols import NotePersister

T = TypeVar("T")

# Derived field names in the cache
_TYPE = "type"
_TIMESTAMP = "timestamp"
_SUBJECT = "subject"
_FORMATTED_SUBJECT = "formatted_subject"
_COMMENT_PREVIEW = "comment_preview"
_ICON_URL = "icon_url"
_ACTIONS = "actions"


def _opt_boolean(values: Mapping[str, Any], key: str) -> bool:
    """Read a JSON flag that may be sent as a bool or as the string "true"."""
    value = values.get(key)
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.lower() == "true"


class Note:
    """A notification whose canonical form is an opaque JSON document.

    Typed fields are read out of the document with path queries and cached
    until the document is replaced through ``replace_document``.
    """

    def __init__(
        self,
        document: MutableMapping[str, Any],
        *,
        persister: "NotePersister | None" = None,
    ) -> None:
        self._document = document
        self._cache = DerivedFieldCache()
        self.persister = persister

    def __repr__(self) -> str:
        return f"Note(id={self.id!r}, type={self.get_type()!r})"

    # --- Sync plumbing ---

    def diffable_value(self) -> MutableMapping[str, Any]:
        """The document a sync layer diffs against the remote copy."""
        return self._document

    @property
    def bucket_key(self) -> str:
        return self.id

    def replace_document(self, document: MutableMapping[str, Any]) -> None:
        """Swap in a new document and drop every derived field."""
        self._document = document
        self._cache.invalidate_all()

    @property
    def derived_fields(self) -> DerivedFieldCache:
        return self._cache

    def save(self) -> None:
        if self.persister is None:
            logger.debug("Note {} has no persister, not saving", self.id)
            return
        self.persister.save(self)

    def _query(self, path: str, default: T) -> T:
        return resolve(self._document, path, default)

    # --- Identity and type ---

    @property
    def id(self) -> str:
        value = self._query("id", None)
        return str(0 if value is None else value)

    def get_type(self) -> str:
        return self._cache.get(_TYPE, lambda: self._query("type", NOTE_UNKNOWN_TYPE))

    def _is_type(self, note_type: str) -> bool:
        return self.get_type() == note_type

    def is_comment_type(self) -> bool:
        """Matcher notes count as comments only when they carry a non-negative comment id."""
        return (
            self.is_automattcher_type() and self._query("meta.ids.comment", -1) >= 0
        ) or self._is_type(NOTE_COMMENT_TYPE)

    def is_automattcher_type(self) -> bool:
        return self._is_type(NOTE_MATCHER_TYPE)

    # --- Plain fields ---

    def get_title(self) -> str:
        return self._query("title", "")

    def get_icon_url(self) -> str:
        return self._cache.get(_ICON_URL, lambda: self._query("icon", ""))

    def get_noticon_character(self) -> str:
        """Character code for the notification icon font."""
        return self._query("noticon", "")

    def get_body(self) -> list[Any]:
        return self._query("body", [])

    def get_header(self) -> list[Any] | None:
        header = self._query("header", None)
        return header if isinstance(header, list) else None

    def get_blog_id(self) -> int:
        return self._query("meta.ids.site", 0)

    def get_post_id(self) -> int:
        return self._query("meta.ids.post", 0)

    def get_comment_id(self) -> int:
        return self._query("meta.ids.comment", 0)

    # --- Timestamp ---

    def get_timestamp(self) -> int:
        """Seconds since the epoch, parsed once from the ISO-8601 ``timestamp``.

        Raises:
            InvalidTimestampError: If the timestamp is absent or unparseable.
                The failure is not cached.
        """
        return self._cache.get(
            _TIMESTAMP, lambda: iso8601_to_timestamp(self._query("timestamp", ""))
        )

    def _timestamp_or_zero(self) -> int:
        try:
            return self.get_timestamp()
        except ValueError:
            logger.warning("Note {} has an unparseable timestamp, using 0", self.id)
            return 0

    @staticmethod
    def get_time_group_for_timestamp(
        timestamp: int, *, now: float | None = None
    ) -> NoteTimeGroup:
        if is_days_older_than(timestamp, 30, now=now):
            return NoteTimeGroup.OLDER_MONTH
        if is_days_older_than(timestamp, 7, now=now):
            return NoteTimeGroup.OLDER_WEEK
        if is_days_older_than(timestamp, 2, now=now):
            return NoteTimeGroup.OLDER_TWO_DAYS
        if is_days_older_than(timestamp, 1, now=now):
            return NoteTimeGroup.YESTERDAY
        return NoteTimeGroup.TODAY

    # --- Subject ---

    def get_subject(self) -> Mapping[str, Any] | None:
        """First element of the ``subject`` array, if it is an object."""
        return self._cache.get(_SUBJECT, lambda: self._query("subject[0]", {}) or None)

    def get_formatted_subject(self) -> FormattedSubject:
        return self._cache.get(_FORMATTED_SUBJECT, lambda: format_subject(self.get_subject()))

    def get_comment_subject(self) -> str:
        """Preview text from the second subject element, trimmed for display."""
        return self._cache.get(_COMMENT_PREVIEW, self._compute_comment_preview)

    def _compute_comment_preview(self) -> str:
        if not isinstance(self._document.get("subject"), list):
            return ""
        preview = self._query("subject[1].text", "")
        # Trim down the comment preview if the comment text is too large.
        if len(preview) > MAX_COMMENT_PREVIEW_LENGTH:
            preview = preview[: MAX_COMMENT_PREVIEW_LENGTH - 1]
        return preview

    # --- Read state ---

    def is_read(self) -> bool:
        return self._query("read", 0) == 1

    def is_unread(self) -> bool:
        """The inverse of is_read."""
        return not self.is_read()

    def mark_as_read(self) -> None:
        """Set the read flag and persist. Derived fields are left as they are."""
        try:
            self._document["read"] = 1
        except TypeError:
            logger.exception("Unable to update note {} read property", self.id)
            return
        self.save()

    # --- Comment actions ---

    def get_comment_actions(self) -> Mapping[str, Any]:
        return self._cache.get(_ACTIONS, lambda: self._query("body[last].actions", {}))

    def get_enabled_actions(self) -> frozenset[EnabledAction]:
        """Actions allowed on this note, assuming it is a comment notification.

        The approve flag is the current approval state, so ``True`` enables
        UNAPPROVE and ``False`` enables APPROVE.
        """
        actions = self.get_comment_actions()
        if not actions:
            return frozenset()

        enabled: set[EnabledAction] = set()
        if ACTION_KEY_REPLY in actions:
            enabled.add(EnabledAction.REPLY)
        if ACTION_KEY_APPROVE in actions:
            if _opt_boolean(actions, ACTION_KEY_APPROVE):
                enabled.add(EnabledAction.UNAPPROVE)
            else:
                enabled.add(EnabledAction.APPROVE)
        if ACTION_KEY_SPAM in actions:
            enabled.add(EnabledAction.SPAM)
        if ACTION_KEY_LIKE in actions:
            enabled.add(EnabledAction.LIKE)
        return frozenset(enabled)

    def get_comment_status(self) -> CommentStatus:
        enabled = self.get_enabled_actions()
        if EnabledAction.UNAPPROVE in enabled:
            return CommentStatus.APPROVED
        if EnabledAction.APPROVE in enabled:
            return CommentStatus.UNAPPROVED
        return CommentStatus.UNKNOWN

    def has_liked_comment(self) -> bool:
        actions = self.get_comment_actions()
        return bool(actions) and _opt_boolean(actions, ACTION_KEY_LIKE)

    # --- Comment projection ---

    def _user_body_item(self) -> Mapping[str, Any] | None:
        for item in self.get_body():
            if isinstance(item, Mapping) and item.get("type") == "user":
                return item
        return None

    def get_comment_author_name(self) -> str:
        item = self._user_body_item()
        return resolve(item, "text", "") if item is not None else ""

    def get_comment_author_url(self) -> str:
        item = self._user_body_item()
        return resolve(item, "meta.links.home", "") if item is not None else ""

    def get_comment_text(self) -> str:
        return self._query("body[last].text", "")

    def build_comment(self) -> Comment:
        """Snapshot the comment this note is about."""
        return Comment(
            post_id=self.get_post_id(),
            comment_id=self.get_comment_id(),
            author_name=self.get_comment_author_name(),
            author_url=self.get_comment_author_url(),
            published=timestamp_to_iso8601(self._timestamp_or_zero()),
            text=self.get_comment_text(),
            status=self.get_comment_status(),
            icon_url=self.get_icon_url(),
        )

    def build_reply(self, content: str) -> Reply:
        if self.is_comment_type():
            rest_path = f"sites/{self.get_blog_id()}/comments/{self.get_comment_id()}"
        else:
            rest_path = f"sites/{self.get_blog_id()}/posts/{self.get_post_id()}"
        return Reply(rest_path=f"{rest_path}/replies/new", content=content)
