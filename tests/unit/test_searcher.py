"""Tests for FTS query preparation."""

import sqlite3

from note_sync.core.search.searcher import _prepare_fts_query, search_note_keys


def test_prepare_fts_query_adds_prefix_matching() -> None:
    assert _prepare_fts_query("comment al") == "comment* al"


def test_prepare_fts_query_keeps_operators_and_phrases() -> None:
    assert _prepare_fts_query('"hello world" or post') == '"hello world" OR post*'


def test_prepare_fts_query_strips_special_characters() -> None:
    assert _prepare_fts_query("foo:bar* (") == "foobar*"
    assert _prepare_fts_query("   ") == ""


def test_search_note_keys_empty_query_returns_nothing(conn: sqlite3.Connection) -> None:
    assert search_note_keys(conn, query="") == ([], 0)
