"""Tests for timestamp conversion and note time groups."""

import pytest

from note_sync.core.document.note import Note
from note_sync.core.document.timeutil import (
    SECONDS_PER_DAY,
    InvalidTimestampError,
    is_days_older_than,
    iso8601_to_timestamp,
    timestamp_to_iso8601,
)
from note_sync.models.note import NoteTimeGroup

NOW = 1_700_000_000


def test_iso8601_to_timestamp_handles_offsets() -> None:
    assert iso8601_to_timestamp("2014-03-01T12:00:00+00:00") == 1393675200
    assert iso8601_to_timestamp("2014-03-01T12:00:00Z") == 1393675200
    assert iso8601_to_timestamp("2014-03-01T13:00:00+01:00") == 1393675200


def test_iso8601_without_offset_is_utc() -> None:
    assert iso8601_to_timestamp("2014-03-01T12:00:00") == 1393675200


@pytest.mark.parametrize("value", ["", "not a date", "2014-13-45T00:00:00"])
def test_iso8601_to_timestamp_rejects_garbage(value: str) -> None:
    with pytest.raises(InvalidTimestampError):
        iso8601_to_timestamp(value)


def test_timestamp_to_iso8601() -> None:
    assert timestamp_to_iso8601(1393675200) == "2014-03-01T12:00:00+00:00"


def test_is_days_older_than_is_strict() -> None:
    assert not is_days_older_than(NOW - SECONDS_PER_DAY, 1, now=NOW)
    assert is_days_older_than(NOW - SECONDS_PER_DAY - 1, 1, now=NOW)


@pytest.mark.parametrize(
    ("age_days", "group"),
    [
        (40, NoteTimeGroup.OLDER_MONTH),
        (10, NoteTimeGroup.OLDER_WEEK),
        (3, NoteTimeGroup.OLDER_TWO_DAYS),
        (1.5, NoteTimeGroup.YESTERDAY),
        (2 / 24, NoteTimeGroup.TODAY),
        (0, NoteTimeGroup.TODAY),
    ],
)
def test_time_group_for_timestamp(age_days: float, group: NoteTimeGroup) -> None:
    timestamp = int(NOW - age_days * SECONDS_PER_DAY)
    assert Note.get_time_group_for_timestamp(timestamp, now=NOW) is group


def test_time_group_defaults_to_current_time() -> None:
    import time

    assert Note.get_time_group_for_timestamp(int(time.time())) is NoteTimeGroup.TODAY
