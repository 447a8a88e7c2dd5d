"""Shared test fixtures."""

import copy
import sqlite3
from typing import Any

import pytest

from note_sync.core.bucket.store import NoteBucket
from note_sync.core.database.schema import create_schema

COMMENT_NOTE: dict[str, Any] = {
    "id": 1001,
    "type": "comment",
    "timestamp": "2014-03-01T12:00:00+00:00",
    "icon": "https://example.com/avatar.png",
    "noticon": "\uf300",
    "read": 0,
    "title": "Comment",
    "subject": [
        {
            "text": "Alice commented on Hello World",
            "ranges": [
                {"type": "user", "indices": [0, 5]},
                {"type": "post", "indices": [19, 30], "url": "https://blog.example.com/hello"},
            ],
        },
        {"text": "Great post, thanks for sharing"},
    ],
    "body": [
        {
            "type": "user",
            "text": "Alice",
            "meta": {"links": {"home": "https://alice.example.com"}},
        },
        {
            "type": "comment",
            "text": "Great post, thanks for sharing",
            "actions": {
                "replyto-comment": True,
                "approve-comment": True,
                "spam-comment": False,
                "like-comment": False,
            },
        },
    ],
    "meta": {"ids": {"site": 42, "post": 7, "comment": 99}},
    "header": [{"text": "Hello World"}],
}

FOLLOW_NOTE: dict[str, Any] = {
    "id": 1002,
    "type": "follow",
    "timestamp": "2014-02-27T08:30:00+00:00",
    "icon": "https://example.com/bob.png",
    "noticon": "\uf801",
    "read": 1,
    "title": "Follow",
    "subject": [{"text": "Bob followed your blog"}],
    "body": [{"type": "user", "text": "Bob"}],
    "meta": {"ids": {"site": 42}},
}


@pytest.fixture
def comment_json() -> dict[str, Any]:
    return copy.deepcopy(COMMENT_NOTE)


@pytest.fixture
def follow_json() -> dict[str, Any]:
    return copy.deepcopy(FOLLOW_NOTE)


@pytest.fixture
def conn() -> sqlite3.Connection:
    """Return an in-memory DB with the bucket schema."""
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    return conn


@pytest.fixture
def bucket(conn: sqlite3.Connection) -> NoteBucket:
    return NoteBucket(conn)
