"""Tests for the processed message ID set."""

import json

from gmail_reply_tracker.dedup import ProcessedIds


def test_has_and_add():
    processed = ProcessedIds()
    assert not processed.has("m1")
    processed.add("m1")
    assert processed.has("m1")
    assert "m1" in processed
    assert len(processed) == 1


def test_eviction_keeps_newest_half():
    """6000 IDs with a cap of 5000 persist as the 2500 most recently added."""
    ids = [f"m{i:05d}" for i in range(6000)]
    processed = ProcessedIds(ids)
    kept = processed.to_list(cap=5000)
    assert len(kept) == 2500
    assert kept == ids[3500:]


def test_no_eviction_at_cap():
    ids = [f"m{i}" for i in range(5000)]
    assert ProcessedIds(ids).to_list(cap=5000) == ids


def test_eviction_keeps_ids_added_during_run():
    processed = ProcessedIds(f"old{i}" for i in range(10))
    processed.add("new")
    kept = processed.to_list(cap=10)
    assert kept[-1] == "new"
    assert len(kept) == 5


def test_serialize_is_json_array():
    processed = ProcessedIds(["a", "b"])
    assert json.loads(processed.serialize()) == ["a", "b"]


def test_load_roundtrip_preserves_order():
    loaded = ProcessedIds.load(json.dumps(["c", "a", "b"]))
    assert list(loaded) == ["c", "a", "b"]


def test_load_collapses_duplicates():
    loaded = ProcessedIds.load('["a", "b", "a"]')
    assert list(loaded) == ["a", "b"]


def test_load_missing_or_malformed():
    assert len(ProcessedIds.load(None)) == 0
    assert len(ProcessedIds.load("")) == 0
    assert len(ProcessedIds.load("not json")) == 0
    assert len(ProcessedIds.load('{"a": 1}')) == 0


def test_readding_does_not_reorder():
    processed = ProcessedIds(["a", "b"])
    processed.add("a")
    assert list(processed) == ["a", "b"]
