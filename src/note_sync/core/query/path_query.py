"""Query values out of a JSON tree with dotted paths like ``body[last].text``."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")

LAST_INDEX = "last"

_SEGMENT_RE = re.compile(r"(?P<key>[^\[\]]+)(?:\[(?P<index>[0-9]+|last)\])?")


class InvalidPathError(ValueError):
    """Raised by parse_path for a malformed path expression."""


@dataclass(frozen=True)
class PathSegment:
    """One step of a path: an object key, optionally followed by an array index.

    ``index`` is None for a plain key, an int for ``name[3]``, or ``"last"``.
    """

    key: str
    index: int | str | None = None


def parse_path(path: str) -> list[PathSegment]:
    """Split a path expression into segments.

    Raises:
        InvalidPathError: If any segment is empty or has a bad index.
    """
    segments: list[PathSegment] = []
    for part in path.split("."):
        match = _SEGMENT_RE.fullmatch(part)
        if match is None:
            msg = f"bad path segment {part!r} in {path!r}"
            raise InvalidPathError(msg)
        raw_index = match.group("index")
        if raw_index is None:
            index: int | str | None = None
        elif raw_index == LAST_INDEX:
            index = LAST_INDEX
        else:
            index = int(raw_index)
        segments.append(PathSegment(key=match.group("key"), index=index))
    return segments


def _is_array(node: Any) -> bool:
    return isinstance(node, list | tuple)


def _matches_kind(value: Any, default: Any) -> bool:
    """Check that value has the same JSON kind as the default."""
    if default is None:
        return True
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if isinstance(default, int):
        return isinstance(value, int)
    if isinstance(default, float):
        return isinstance(value, int | float)
    if isinstance(default, str):
        return isinstance(value, str)
    if isinstance(default, Mapping):
        return isinstance(value, Mapping)
    if _is_array(default):
        return _is_array(value)
    return isinstance(value, type(default))


def _step(node: Any, segment: PathSegment) -> tuple[bool, Any]:
    if not isinstance(node, Mapping) or segment.key not in node:
        return False, None
    child = node[segment.key]
    if segment.index is None:
        return True, child
    if not _is_array(child):
        return False, None
    position = len(child) - 1 if segment.index == LAST_INDEX else segment.index
    if not 0 <= position < len(child):
        return False, None
    return True, child[position]


def resolve(root: Any, path: str, default: T) -> T:
    """Return the value at ``path`` in ``root``, or ``default``.

    Each segment descends one level: ``name`` reads an object key and
    ``name[i]`` reads the key and then array element ``i`` (``last`` is the
    final element). Any missing key, wrong node kind, out-of-range index or
    malformed path gives ``default``, as does a found value whose kind
    differs from the default's. A None default accepts any value.

    Args:
        root: Parsed JSON value (dicts, lists and scalars).
        path: Path expression, e.g. ``"meta.ids.comment"``.
        default: Returned when the path does not resolve.

    Returns:
        The value found, or ``default``.
    """
    try:
        segments = parse_path(path)
    except InvalidPathError:
        return default

    node: Any = root
    for segment in segments:
        found, node = _step(node, segment)
        if not found:
            return default

    if not _matches_kind(node, default):
        return default
    return node  # type: ignore[no-any-return]
