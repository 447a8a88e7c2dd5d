"""Build formatted subject text from a note's subject node."""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from note_sync.core.query.path_query import resolve
from note_sync.models.note import FormattedSubject, SubjectRange


def _parse_range(raw: Any, text_length: int) -> SubjectRange | None:
    indices = resolve(raw, "indices", [])
    if len(indices) != 2:
        return None
    start, end = indices
    if not all(isinstance(i, int) and not isinstance(i, bool) for i in (start, end)):
        return None
    if not 0 <= start < end <= text_length:
        return None
    return SubjectRange(
        start=start,
        end=end,
        kind=resolve(raw, "type", ""),
        url=resolve(raw, "url", ""),
    )


def format_subject(subject: Mapping[str, Any] | None) -> FormattedSubject:
    """Turn a subject node (``text`` plus ``ranges``) into a FormattedSubject.

    Ranges whose indices do not fit the text are skipped.
    """
    if subject is None:
        return FormattedSubject(text="")

    text = resolve(subject, "text", "")
    ranges: list[SubjectRange] = []
    for raw in resolve(subject, "ranges", []):
        rng = _parse_range(raw, len(text))
        if rng is None:
            logger.debug("Skipping malformed subject range: {!r}", raw)
            continue
        ranges.append(rng)
    return FormattedSubject(text=text, ranges=tuple(ranges))
