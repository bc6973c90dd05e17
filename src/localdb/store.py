"""Read and write a single JSON document of records.

JsonStore is the public API:
    store = JsonStore("/path/to/db.json")
    rec = store.create({"name": "a"})
    store.update(rec["id"], {"name": "b"})
    store.query(lambda r: r["name"] == "b")
    store.delete(rec["id"])

File layout (one JSON array, rewritten in full on every mutation):
    [
      {"id": 1760650000000, "name": "a"},
      {"id": 1760650000001, "name": "b"}
    ]

Every operation re-reads the file; no handle or cache is held between calls.
There is no locking: two stores (or processes) on the same path interleaving
load/persist cycles lose updates, the last persist wins.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any

from localdb.models import Document, Record, build_record, merge_record, new_record_id, same_id

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping

logger = logging.getLogger("localdb.store")


class CorruptStoreError(ValueError):
    """The store file does not hold a JSON array."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class JsonStore:
    """JSON-array-backed record store."""

    def __init__(self, path: Path | str, *, indent: int | None = 2, ensure_ascii: bool = False) -> None:
        self.path = Path(path)
        self.indent = indent
        self.ensure_ascii = ensure_ascii
        if not self.path.exists():
            logger.info("initialising empty store at %s", self.path)
            self.persist([])

    def __repr__(self) -> str:
        return f"JsonStore({str(self.path)!r})"

    # ------------------------------------------------------------------
    # Whole-document access
    # ------------------------------------------------------------------

    def load(self) -> Document:
        """Read and parse the whole document."""
        raw = self.path.read_bytes()
        try:
            data = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise CorruptStoreError(self.path, f"not UTF-8 ({exc})") from exc
        except json.JSONDecodeError as exc:
            raise CorruptStoreError(self.path, f"invalid JSON ({exc})") from exc
        if not isinstance(data, list):
            raise CorruptStoreError(self.path, f"expected a JSON array, got {type(data).__name__}")
        for i, record in enumerate(data):
            if not isinstance(record, dict):
                raise CorruptStoreError(self.path, f"element {i} is not a JSON object")
        logger.debug("loaded %d records from %s", len(data), self.path)
        return data

    def persist(self, records: Iterable[Record]) -> None:
        """Replace the file content with the serialized document."""
        doc = list(records)
        payload = json.dumps(doc, indent=self.indent, ensure_ascii=self.ensure_ascii) + "\n"
        # Follow symlinks so the link target is what gets replaced
        target = self.path.resolve()
        # Write to tmp then rename for atomicity
        tmp = target.with_name(target.name + ".tmp")
        try:
            with tmp.open("w", encoding="utf-8") as f:
                f.write(payload)
            if target.exists():
                shutil.copymode(target, tmp)
            tmp.replace(target)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("persisted %d records to %s", len(doc), self.path)

    def read(self) -> Document:
        return self.load()

    def write(self, records: Iterable[Record]) -> None:
        """Bulk replace. Record ids are written verbatim."""
        self.persist(records)

    # ------------------------------------------------------------------
    # Record operations
    # ------------------------------------------------------------------

    def create(self, fields: Mapping[str, Any]) -> Record:
        """Append a new record with a generated id. Any ``id`` in fields is ignored."""
        doc = self.load()
        record = build_record(new_record_id(doc), fields)
        doc.append(record)
        self.persist(doc)
        logger.info("created record %s", record["id"])
        return record

    def get(self, record_id: Any) -> Record | None:
        """Return the first record with this id, or None."""
        for record in self.load():
            if same_id(record.get("id"), record_id):
                return record
        return None

    def update(self, record_id: Any, fields: Mapping[str, Any]) -> Record | None:
        """Shallow-merge fields into the first record with this id.

        Returns the merged record, or None (file untouched) when no record matches.
        """
        doc = self.load()
        index = next((i for i, r in enumerate(doc) if same_id(r.get("id"), record_id)), None)
        if index is None:
            logger.info("update: no record %s", record_id)
            return None

        if "id" in fields and not same_id(fields["id"], record_id):
            logger.warning("update: record %s id overwritten with %s", record_id, fields["id"])
        merged = merge_record(doc[index], fields)
        doc[index] = merged
        self.persist(doc)
        logger.info("updated record %s", record_id)
        return merged

    def delete(self, record_id: Any) -> bool:
        """Remove every record with this id. False (file untouched) if there was none."""
        doc = self.load()
        kept = [r for r in doc if not same_id(r.get("id"), record_id)]
        if len(kept) == len(doc):
            logger.info("delete: no record %s", record_id)
            return False
        self.persist(kept)
        logger.info("deleted %d record(s) with id %s", len(doc) - len(kept), record_id)
        return True

    def query(self, predicate: Callable[[Record], Any]) -> Document:
        """Records for which predicate is truthy, in document order. Read-only."""
        return [r for r in self.load() if predicate(r)]

    # ------------------------------------------------------------------
    # Container protocol (each call re-reads the file)
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.load())

    def __iter__(self) -> Iterator[Record]:
        return iter(self.load())

    def __contains__(self, record_id: object) -> bool:
        return any(same_id(r.get("id"), record_id) for r in self.load())
