from __future__ import annotations

import time

from localdb.models import build_record, match_fields, merge_record, new_record_id, same_id


def test_new_record_id_is_epoch_millis():
    before = time.time_ns() // 1_000_000
    rid = new_record_id()
    after = time.time_ns() // 1_000_000
    assert before <= rid <= after


def test_new_record_id_bumps_past_existing():
    future = time.time_ns() // 1_000_000 + 10_000
    assert new_record_id([{"id": future}, {"id": 3}]) == future + 1


def test_new_record_id_ignores_non_integer_ids():
    rid = new_record_id([{"id": "zzz"}, {"id": True}, {"name": "no id"}, {"id": 1.5e20}])
    assert isinstance(rid, int)
    assert rid < 1.5e20


def test_build_record_puts_id_first_and_wins():
    rec = build_record(10, {"name": "a", "id": 2})
    assert rec == {"id": 10, "name": "a"}
    assert list(rec) == ["id", "name"]


def test_merge_record_is_shallow_and_non_mutating():
    existing = {"id": 1, "a": {"x": 1}, "b": 2}
    merged = merge_record(existing, {"a": {"y": 2}})
    assert merged == {"id": 1, "a": {"y": 2}, "b": 2}
    assert existing == {"id": 1, "a": {"x": 1}, "b": 2}


def test_match_fields():
    pred = match_fields(kind="x", n=1)
    assert pred({"kind": "x", "n": 1, "other": True})
    assert not pred({"kind": "x", "n": 2})
    assert not pred({"kind": "x"})


def test_match_fields_none_requires_presence():
    pred = match_fields(deleted=None)
    assert pred({"deleted": None})
    assert not pred({})


def test_match_fields_empty_matches_everything():
    assert match_fields()({})


def test_same_id():
    assert same_id(1, 1)
    assert same_id(1, 1.0)
    assert same_id("a", "a")
    assert same_id(True, True)
    assert not same_id(True, 1)
    assert not same_id(0, False)
    assert not same_id("1", 1)
    assert not same_id(None, 0)
