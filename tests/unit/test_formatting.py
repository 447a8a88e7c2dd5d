"""Tests for subject formatting."""

from note_sync.core.document.formatting import format_subject
from note_sync.models.note import FormattedSubject, SubjectRange


def test_format_subject_none_is_empty() -> None:
    assert format_subject(None) == FormattedSubject(text="")


def test_format_subject_collects_ranges() -> None:
    subject = format_subject(
        {
            "text": "Bob liked your post",
            "ranges": [
                {"type": "user", "indices": [0, 3]},
                {"type": "post", "indices": [15, 19], "url": "https://x.example/p"},
            ],
        }
    )
    assert subject.ranges == (
        SubjectRange(start=0, end=3, kind="user"),
        SubjectRange(start=15, end=19, kind="post", url="https://x.example/p"),
    )


def test_format_subject_skips_malformed_ranges() -> None:
    subject = format_subject(
        {
            "text": "short",
            "ranges": [
                {"indices": [0, 99]},
                {"indices": [3, 1]},
                {"indices": ["0", "2"]},
                {"indices": [0]},
                "not a range",
                {"indices": [0, 2]},
            ],
        }
    )
    assert subject.ranges == (SubjectRange(start=0, end=2),)


def test_to_html_escapes_text() -> None:
    subject = FormattedSubject(
        text="<script> & co",
        ranges=(SubjectRange(start=11, end=13),),
    )
    assert subject.to_html() == "&lt;script&gt; &amp; <b>co</b>"


def test_to_html_drops_overlapping_ranges() -> None:
    subject = FormattedSubject(
        text="abcdef",
        ranges=(SubjectRange(start=2, end=5), SubjectRange(start=0, end=3)),
    )
    assert subject.to_html() == "<b>abc</b>def"
