"""Tests for the SQLite state store."""

from gmail_reply_tracker.state import StateStore


def test_set_and_get(tmp_path):
    db_path = tmp_path / "state.db"

    with StateStore(db_path=db_path) as store:
        store.set("processedMessageIds", '["m1"]')

    with StateStore(db_path=db_path) as store:
        assert store.get("processedMessageIds") == '["m1"]'


def test_overwrite(tmp_path):
    with StateStore(db_path=tmp_path / "state.db") as store:
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"


def test_missing_key(tmp_path):
    with StateStore(db_path=tmp_path / "state.db") as store:
        assert store.get("nope") is None


def test_delete_and_clear(tmp_path):
    with StateStore(db_path=tmp_path / "state.db") as store:
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        assert store.get("a") is None
        assert store.get("b") == "2"
        store.clear()
        assert store.get("b") is None


def test_get_info(tmp_path):
    with StateStore(db_path=tmp_path / "state.db") as store:
        assert store.get_info()["keys"] == {}
        store.set("processedMessageIds", '["m1", "m2"]')
        info = store.get_info()

    assert info["db_file_size"] > 0
    assert info["keys"]["processedMessageIds"]["size"] == len('["m1", "m2"]')
    assert info["keys"]["processedMessageIds"]["updated_at"]
