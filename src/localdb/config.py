"""StoreConfig: project-local config for a localdb store.

Default layout (all relative to the project root):

    localdb.toml          # project config
    db.json               # the store file

localdb.toml example:

    [store]
    path = "db.json"
    indent = 2
    ensure_ascii = false
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from localdb.store import JsonStore

_CONFIG_FILENAME = "localdb.toml"
_DEFAULT_STORE_PATH = "db.json"


@dataclass
class StoreConfig:
    """Resolved configuration for a localdb project."""

    root: Path                      # directory that contains localdb.toml
    path: Path = field(default_factory=Path)
    indent: int | None = 2
    ensure_ascii: bool = False

    def open(self) -> JsonStore:
        return JsonStore(self.path, indent=self.indent, ensure_ascii=self.ensure_ascii)


def load_config(root: Path | str | None = None) -> StoreConfig:
    """Load localdb.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    section = raw.get("store", {})
    store_rel = Path(section.get("path", _DEFAULT_STORE_PATH)).expanduser()

    # indent = 0 in toml means compact output
    indent = int(section.get("indent", 2))

    return StoreConfig(
        root=root_path,
        path=store_rel if store_rel.is_absolute() else root_path / store_rel,
        indent=indent or None,
        ensure_ascii=bool(section.get("ensure_ascii", False)),
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for localdb.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path, path: str | None = None) -> Path:
    """Write a default localdb.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"localdb.toml already exists at {config_path}"
        raise FileExistsError(msg)

    store_path = path or _DEFAULT_STORE_PATH
    # TOML literal strings keep backslashes verbatim but cannot hold ' or control characters
    if "'" in store_path or any(c != "\t" and (c < " " or c == "\x7f") for c in store_path):
        msg = f"store path cannot contain ' or control characters: {store_path!r}"
        raise ValueError(msg)

    content = f"""\
[store]
path = '{store_path}'
# indent = 2            # 0 writes compact JSON
# ensure_ascii = false  # true escapes non-ASCII characters
"""
    config_path.write_text(content, encoding="utf-8")
    return config_path
