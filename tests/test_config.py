from __future__ import annotations

import pytest

from localdb.config import init_config, load_config
from localdb.store import JsonStore


def test_defaults_without_config_file(tmp_path):
    cfg = load_config(tmp_path)
    assert cfg.root == tmp_path
    assert cfg.path == tmp_path / "db.json"
    assert cfg.indent == 2
    assert cfg.ensure_ascii is False


def test_reads_store_section(tmp_path):
    (tmp_path / "localdb.toml").write_text(
        '[store]\npath = "data/records.json"\nindent = 0\nensure_ascii = true\n'
    )
    cfg = load_config(tmp_path)
    assert cfg.path == tmp_path / "data" / "records.json"
    assert cfg.indent is None
    assert cfg.ensure_ascii is True


def test_absolute_store_path_is_kept(tmp_path):
    target = tmp_path / "elsewhere.json"
    (tmp_path / "localdb.toml").write_text(f'[store]\npath = "{target.as_posix()}"\n')
    assert load_config(tmp_path).path == target


def test_finds_config_in_parent(tmp_path, monkeypatch):
    (tmp_path / "localdb.toml").write_text('[store]\npath = "x.json"\n')
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    cfg = load_config()
    assert cfg.root == tmp_path
    assert cfg.path == tmp_path / "x.json"


def test_init_config_roundtrip(tmp_path):
    path = init_config(tmp_path, path="records.json")
    assert path == tmp_path / "localdb.toml"
    cfg = load_config(tmp_path)
    assert cfg.path == tmp_path / "records.json"
    assert cfg.indent == 2


def test_init_config_refuses_to_overwrite(tmp_path):
    init_config(tmp_path)
    with pytest.raises(FileExistsError):
        init_config(tmp_path)


def test_open_creates_store(tmp_path):
    init_config(tmp_path)
    store = load_config(tmp_path).open()
    assert isinstance(store, JsonStore)
    assert store.path.read_text(encoding="utf-8") == "[]\n"


def test_init_config_keeps_backslashes(tmp_path):
    init_config(tmp_path, path="C:\\new\\db.json")
    assert load_config(tmp_path).path == tmp_path / "C:\\new\\db.json"


@pytest.mark.parametrize("bad", ["it's.json", "a\nb.json"])
def test_init_config_rejects_unwritable_paths(tmp_path, bad):
    with pytest.raises(ValueError):
        init_config(tmp_path, path=bad)
    assert not (tmp_path / "localdb.toml").exists()
