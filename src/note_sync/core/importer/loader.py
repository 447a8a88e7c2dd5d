"""Feed remote note JSON into the notes bucket."""

import json
import sqlite3
import time
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from note_sync.core.bucket.store import ApplyResult, NoteBucket
from note_sync.core.database.schema import set_metadata


@dataclass(frozen=True)
class ImportStats:
    """Summary of an import operation."""

    built: int
    updated: int
    unchanged: int
    skipped: int


def load_payload(path: Path) -> list[Any]:
    """Read notes from a JSON file.

    The file holds either a list of notes or an object with a ``notes`` list,
    as returned by the notifications REST endpoint.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("notes")
    if not isinstance(data, list):
        msg = f"No list of notes found in {path}"
        raise ValueError(msg)
    return data


def import_notes(bucket: NoteBucket, notes: Iterable[Any]) -> ImportStats:
    """Apply each remote note to the bucket, keyed by its stringified id."""
    counts = dict.fromkeys(ApplyResult, 0)
    skipped = 0

    for raw in notes:
        if not isinstance(raw, dict) or raw.get("id") is None:
            logger.warning("Skipping note without id: {!r}", raw)
            skipped += 1
            continue

        key = str(raw["id"])
        try:
            result = bucket.apply_remote(key, raw)
        except sqlite3.Error:
            logger.exception("Failed to store note {}", key)
            skipped += 1
            continue
        counts[result] += 1

    logger.info(
        "Import complete: {} new, {} updated, {} unchanged, {} skipped",
        counts[ApplyResult.BUILT], counts[ApplyResult.UPDATED],
        counts[ApplyResult.UNCHANGED], skipped,
    )
    return ImportStats(
        built=counts[ApplyResult.BUILT],
        updated=counts[ApplyResult.UPDATED],
        unchanged=counts[ApplyResult.UNCHANGED],
        skipped=skipped,
    )


def import_notes_file(bucket: NoteBucket, conn: sqlite3.Connection, path: Path) -> ImportStats:
    """Import a notes JSON file and record the import time."""
    stats = import_notes(bucket, load_payload(path))
    set_metadata(conn, "last_import_at", str(int(time.time())))
    return stats
