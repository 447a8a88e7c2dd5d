"""Per-note memoization of values derived from the note's document."""

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


class DerivedFieldCache:
    """Lazily computed fields, all dropped together when the document changes.

    A field is either unset or holds the value computed from the current
    document. ``invalidate_all`` unsets every field in one step.
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get(self, name: str, compute: Callable[[], T]) -> T:
        """Return the cached value for ``name``, computing it on first access.

        If ``compute`` raises, nothing is stored and the error propagates.
        """
        try:
            return self._values[name]  # type: ignore[no-any-return]
        except KeyError:
            pass
        value = compute()
        self._values[name] = value
        return value

    def is_cached(self, name: str) -> bool:
        return name in self._values

    def cached_fields(self) -> frozenset[str]:
        return frozenset(self._values)

    def invalidate_all(self) -> None:
        """Unset every derived field."""
        self._values = {}
