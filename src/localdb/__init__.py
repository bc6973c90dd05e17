"""Local JSON document store: one JSON array of records per file.

Layout:
    db.json              # [{"id": <int>, ...fields}, ...] rewritten in full on each mutation
    localdb.toml         # optional project config (store path, formatting)

Every operation is load → compute → persist → return; nothing is cached between
calls and nothing is locked, so concurrent writers on one file lose updates.
"""

from localdb.config import StoreConfig, init_config, load_config
from localdb.models import Document, Record, match_fields, new_record_id
from localdb.store import CorruptStoreError, JsonStore

__all__ = [
    "CorruptStoreError",
    "Document",
    "JsonStore",
    "Record",
    "StoreConfig",
    "init_config",
    "load_config",
    "match_fields",
    "new_record_id",
]
