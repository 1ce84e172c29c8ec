"""Tests for the in-memory store used with USE_MOCK_DB."""

import json
from datetime import datetime, timezone

from app.config.mock_firestore import MockFirestore, get_mock_db


def test_set_then_get_returns_a_copy():
    db = MockFirestore()
    ref = db.collection("alerts").document("a1")
    ref.set({"title": "Flood"})

    snapshot = ref.get()
    snapshot.to_dict()["title"] = "changed"

    assert snapshot.exists
    assert ref.get().to_dict() == {"title": "Flood"}
    assert not db.collection("alerts").document("missing").get().exists


def test_order_by_descending_with_limit():
    db = MockFirestore()
    for day in (1, 3, 2):
        db.collection("alerts").document(f"a{day}").set({"time": datetime(2024, 7, day, tzinfo=timezone.utc)})

    docs = list(db.collection("alerts").order_by("time", direction="DESCENDING").limit(2).stream())

    assert [doc.id for doc in docs] == ["a3", "a2"]


def test_documents_without_the_sort_field_come_last_when_descending():
    db = MockFirestore()
    db.collection("alerts").document("dated").set({"time": datetime(2024, 7, 1, tzinfo=timezone.utc)})
    db.collection("alerts").document("undated").set({"title": "no time"})

    docs = list(db.collection("alerts").order_by("time", direction="DESCENDING").stream())

    assert [doc.id for doc in docs] == ["dated", "undated"]


def test_seed_file_is_loaded_with_timestamps(tmp_path):
    seed_path = tmp_path / "seed.json"
    seed_path.write_text(json.dumps({"alerts": {"a1": {"title": "Heatwave", "time": "2024-07-15T10:00:00Z"}}}))

    db = get_mock_db(str(seed_path))

    stored = db.collection("alerts").document("a1").get().to_dict()
    assert stored["time"] == datetime(2024, 7, 15, 10, tzinfo=timezone.utc)
    assert [c.id for c in db.collections()] == ["alerts"]


def test_missing_seed_file_gives_empty_store(tmp_path):
    db = get_mock_db(str(tmp_path / "absent.json"))

    assert db.collections() == []
