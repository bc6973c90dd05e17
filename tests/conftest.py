from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from localdb.store import JsonStore


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db.json"


@pytest.fixture()
def store(db_path: Path) -> JsonStore:
    return JsonStore(db_path)


@pytest.fixture()
def digest():
    """Content hash of a file, for before/after comparisons."""
    def _digest(path: Path) -> str:
        return hashlib.sha256(path.read_bytes()).hexdigest()
    return _digest


@pytest.fixture()
def on_disk():
    """Decoded file content, bypassing the store."""
    def _on_disk(path: Path) -> list:
        return json.loads(path.read_text(encoding="utf-8"))
    return _on_disk
