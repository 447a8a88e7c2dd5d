"""Value objects derived from a synced note."""

import html
from dataclasses import dataclass
from enum import Enum, StrEnum, auto


class EnabledAction(Enum):
    """Actions a comment note currently allows."""

    REPLY = auto()
    APPROVE = auto()
    UNAPPROVE = auto()
    SPAM = auto()
    LIKE = auto()


class NoteTimeGroup(Enum):
    """Age bucket of a note, used for section headers in listings."""

    TODAY = auto()
    YESTERDAY = auto()
    OLDER_TWO_DAYS = auto()
    OLDER_WEEK = auto()
    OLDER_MONTH = auto()


class CommentStatus(StrEnum):
    """Moderation status of a comment, using the REST API status names."""

    APPROVED = "approve"
    UNAPPROVED = "hold"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Reply:
    """A user replying to a note."""

    rest_path: str
    content: str


@dataclass(frozen=True)
class Comment:
    """Snapshot of the comment a note is about."""

    post_id: int
    comment_id: int
    author_name: str
    author_url: str
    published: str
    text: str
    status: CommentStatus
    icon_url: str


@dataclass(frozen=True)
class IndexEntry:
    """A named index value stored alongside a bucket object."""

    name: str
    value: int | str | bool


@dataclass(frozen=True)
class SubjectRange:
    """A formatted span of a subject, in character offsets."""

    start: int
    end: int
    kind: str = ""
    url: str = ""


@dataclass(frozen=True)
class FormattedSubject:
    """Subject text with its formatted ranges."""

    text: str
    ranges: tuple[SubjectRange, ...] = ()

    def to_html(self) -> str:
        """Render the subject as inline HTML.

        Linked ranges become anchors, all other ranges are bolded.
        Overlapping ranges are dropped in favor of the earlier one.
        """
        out: list[str] = []
        pos = 0
        for rng in sorted(self.ranges, key=lambda r: (r.start, -r.end)):
            if rng.start < pos:
                continue
            out.append(html.escape(self.text[pos : rng.start]))
            inner = html.escape(self.text[rng.start : rng.end])
            if rng.url:
                out.append(f'<a href="{html.escape(rng.url, quote=True)}">{inner}</a>')
            else:
                out.append(f"<b>{inner}</b>")
            pos = rng.end
        out.append(html.escape(self.text[pos:]))
        return "".join(out)
