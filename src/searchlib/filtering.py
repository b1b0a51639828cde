"""Filter a record collection against a query."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Sequence

from .matching import matches

logger = logging.getLogger(__name__)


def filter_records(
    records: Iterable[Any],
    keys: Sequence[str],
    query: str,
    max_results: int = 0,
) -> List[Any]:
    """Return the records matching ``query`` in collection order.

    A record object appears at most once even if the collection holds it
    several times. ``max_results <= 0`` means unbounded.
    """
    if not query:
        return []

    seen: set[int] = set()
    filtered: List[Any] = []
    for record in records:
        # identity, not equality: records may be unhashable dicts
        if id(record) in seen:
            continue
        if matches(record, keys, query):
            seen.add(id(record))
            filtered.append(record)
            if max_results > 0 and len(filtered) >= max_results:
                break

    logger.debug("Filtered %d records for query %r", len(filtered), query)
    return filtered
