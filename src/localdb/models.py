"""Record shapes and identifier helpers for the JSON document store."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

Record = dict[str, Any]
Document = list[Record]


def new_record_id(existing: Iterable[Record] = ()) -> int:
    """Generate a record ID: milliseconds since the epoch.

    Bumped past the largest integer id already in ``existing`` so that two
    creates within the same millisecond still get distinct ids.
    """
    candidate = time.time_ns() // 1_000_000
    ids = [r.get("id") for r in existing]
    highest = max((i for i in ids if isinstance(i, int) and not isinstance(i, bool)), default=None)
    if highest is not None and candidate <= highest:
        candidate = highest + 1
    return candidate


def same_id(a: Any, b: Any) -> bool:
    """Id equality where booleans never equal numbers (``True`` is not id ``1``)."""
    return isinstance(a, bool) == isinstance(b, bool) and a == b


def build_record(record_id: Any, fields: Mapping[str, Any]) -> Record:
    """Return ``{"id": record_id, **fields}`` with ``record_id`` winning over any ``id`` in fields."""
    record: Record = {"id": record_id}
    record.update((k, v) for k, v in fields.items() if k != "id")
    return record


def merge_record(existing: Record, fields: Mapping[str, Any]) -> Record:
    """Shallow merge: keys in ``fields`` replace those in ``existing``, the rest are kept."""
    return {**existing, **fields}


def match_fields(**expected: Any) -> Callable[[Record], bool]:
    """Build a query predicate that is true when every given field equals the expected value.

    Missing fields never match, even when the expected value is ``None``.
    """
    def predicate(record: Record) -> bool:
        return all(k in record and record[k] == v for k, v in expected.items())

    return predicate
