"""Nested field resolution and record matching."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

Record = Mapping[str, Any]


def resolve_path(record: Any, path: str) -> Optional[Any]:
    """Walk a dot-separated path into a record.

    Mapping segments are looked up by key and sequence segments by integer
    index. Any missing segment resolves to ``None``; this never raises.
    """
    current = record
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(part)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                current = current[int(part)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return current


def matches(record: Any, keys: Iterable[str], query: str) -> bool:
    """Return True when any filterable key holds a string containing ``query``.

    Comparison is case-insensitive. Non-string values never match and an
    empty query matches nothing.
    """
    if not query:
        return False
    needle = query.casefold()
    for key in keys:
        value = resolve_path(record, key)
        if isinstance(value, str) and needle in value.casefold():
            return True
    return False


def display_value(record: Any, display_key: str) -> str:
    """Text shown for a record in the input box and the result rows."""
    value = resolve_path(record, display_key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
