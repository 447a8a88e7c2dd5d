"""FTS5 search over indexed note subjects and snippets."""

import re
import sqlite3


def _sanitize_fts_token(token: str) -> str:
    """Remove FTS5 special characters (whitelist approach)."""
    return re.sub(r"[^\w]", "", token, flags=re.UNICODE)


def _prepare_fts_query(query: str) -> str:
    """Convert user query to FTS5 query with prefix matching.

    - 3+ char words get * suffix for prefix matching
    - Quoted phrases are preserved as-is
    - FTS5 operators AND, OR, NOT are preserved
    """
    if not query.strip():
        return ""

    tokens: list[str] = []
    i = 0
    while i < len(query):
        if query[i] == '"':
            end = query.find('"', i + 1)
            if end == -1:
                end = len(query)
            phrase = query[i + 1 : end].replace('"', "")
            if phrase.strip():
                tokens.append(f'"{phrase}"')
            i = end + 1
        elif query[i].isspace():
            i += 1
        else:
            end = i
            while end < len(query) and not query[end].isspace() and query[end] != '"':
                end += 1
            word = query[i:end]
            i = end

            if word.upper() in ("AND", "OR", "NOT"):
                tokens.append(word.upper())
                continue

            sanitized = _sanitize_fts_token(word)
            if not sanitized:
                continue
            if len(sanitized) >= 3:
                tokens.append(f"{sanitized}*")
            else:
                tokens.append(sanitized)

    return " ".join(tokens)


def search_note_keys(
    conn: sqlite3.Connection,
    *,
    query: str,
    unread_only: bool = False,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[str], int]:
    """Find notes whose subject or snippet matches ``query``.

    Args:
        conn: Database connection.
        query: Search query text.
        unread_only: Restrict to unread notes.
        limit: Max results to return.
        offset: Pagination offset.

    Returns:
        Tuple of (note keys ordered by relevance, total_count).
    """
    fts_query = _prepare_fts_query(query)
    if not fts_query:
        return [], 0

    where_clauses = ["notes_fts MATCH ?"]
    params: list[str | int] = [fts_query]
    if unread_only:
        where_clauses.append("n.unread = 1")
    where_sql = " AND ".join(where_clauses)

    count_sql = f"""
        SELECT COUNT(*)
        FROM notes_fts
        JOIN notes n ON n.rowid = notes_fts.rowid
        WHERE {where_sql}
    """
    total = conn.execute(count_sql, params).fetchone()[0]

    select_sql = f"""
        SELECT n.key
        FROM notes_fts
        JOIN notes n ON n.rowid = notes_fts.rowid
        WHERE {where_sql}
        ORDER BY rank, n.timestamp DESC
        LIMIT ? OFFSET ?
    """
    params.extend([limit, offset])
    rows = conn.execute(select_sql, params).fetchall()
    return [row[0] for row in rows], total
