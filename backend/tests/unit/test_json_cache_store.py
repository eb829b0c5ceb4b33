"""Unit tests for the JSON file cache store."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from resource_search.domain.entities import CacheMetadata, TrainingResource
from resource_search.domain.exceptions import CacheIOError
from resource_search.infrastructure.storage import JsonCacheStore, json_cache_store


@pytest.fixture
def store(tmp_path) -> JsonCacheStore:
    return JsonCacheStore(
        cache_path=tmp_path / "embedded-resources.json",
        meta_path=tmp_path / "cache-metadata.json",
    )


def _records() -> list[TrainingResource]:
    return [
        TrainingResource.from_dict(
            {"Title": "Docking", "Topic": "Basics", "Description": "How to dock", "Url": "/v/1"}
        ).with_embedding([0.1, 0.2]),
        TrainingResource("Anchoring", "Basics", "How to anchor", embedding=(0.3, 0.4)),
    ]


def _metadata(hours_ago: float) -> CacheMetadata:
    return CacheMetadata(
        last_updated=datetime.now(timezone.utc) - timedelta(hours=hours_ago),
        item_count=2,
    )


# ── Validity ─────────────────────────────────────────────────────────


def test_valid_when_fresh_and_snapshot_present(store: JsonCacheStore):
    store.save(_records(), _metadata(hours_ago=1))
    assert store.is_valid()


def test_invalid_when_older_than_window(store: JsonCacheStore):
    store.save(_records(), _metadata(hours_ago=25))
    assert not store.is_valid()


def test_invalid_without_snapshot_file(store: JsonCacheStore):
    store.save(_records(), _metadata(hours_ago=1))
    store.cache_path.unlink()
    assert not store.is_valid()


def test_invalid_without_metadata(store: JsonCacheStore, tmp_path):
    store.save(_records(), _metadata(hours_ago=1))
    (tmp_path / "cache-metadata.json").unlink()
    assert not store.is_valid()


def test_invalid_when_metadata_lacks_timestamp(store: JsonCacheStore, tmp_path):
    store.save(_records(), _metadata(hours_ago=1))
    (tmp_path / "cache-metadata.json").write_text(json.dumps({"itemCount": 2}), "utf-8")
    assert not store.is_valid()


def test_corrupt_metadata_degrades_to_invalid(store: JsonCacheStore, tmp_path):
    store.save(_records(), _metadata(hours_ago=1))
    (tmp_path / "cache-metadata.json").write_text("not json", "utf-8")

    assert store.read_metadata() is None
    assert not store.is_valid()


def test_validity_uses_supplied_clock(store: JsonCacheStore):
    store.save(_records(), _metadata(hours_ago=0))
    later = datetime.now(timezone.utc) + timedelta(hours=24, minutes=1)
    assert not store.is_valid(now=later)


def test_accepts_javascript_iso_timestamps(store: JsonCacheStore, tmp_path):
    store.save(_records(), _metadata(hours_ago=1))
    stamp = (datetime.now(timezone.utc) - timedelta(hours=2)).strftime("%Y-%m-%dT%H:%M:%S.000Z")
    (tmp_path / "cache-metadata.json").write_text(
        json.dumps({"lastUpdated": stamp, "itemCount": 2, "version": "1.0"}), "utf-8"
    )

    metadata = store.read_metadata()
    assert metadata.item_count == 2
    assert store.is_valid()


# ── Snapshot ─────────────────────────────────────────────────────────


def test_save_then_load_preserves_fields(store: JsonCacheStore, tmp_path):
    store.save(_records(), _metadata(hours_ago=0))

    loaded = store.load()

    assert loaded == _records()
    assert loaded[0].extra == {"Url": "/v/1"}
    raw = json.loads((tmp_path / "embedded-resources.json").read_text("utf-8"))
    assert raw[0]["Title"] == "Docking"
    assert raw[0]["embedding"] == [0.1, 0.2]
    meta = json.loads((tmp_path / "cache-metadata.json").read_text("utf-8"))
    assert meta["itemCount"] == 2
    assert meta["version"] == "1.0"


def test_failed_metadata_write_does_not_revalidate_new_snapshot(
    store: JsonCacheStore, monkeypatch
):
    store.save(_records(), _metadata(hours_ago=1))
    assert store.is_valid()

    real_write = json_cache_store._write_json_atomic

    def refuse_metadata(path, payload):
        if path.name == "cache-metadata.json":
            raise OSError("read-only file system")
        real_write(path, payload)

    monkeypatch.setattr(json_cache_store, "_write_json_atomic", refuse_metadata)
    store.save(_records()[:1], _metadata(hours_ago=0))

    assert store.has_snapshot()
    assert store.read_metadata() is None
    assert not store.is_valid()


def test_load_missing_snapshot_raises(store: JsonCacheStore):
    with pytest.raises(CacheIOError):
        store.load()


def test_load_corrupt_snapshot_raises(store: JsonCacheStore):
    store.cache_path.write_text("[{", "utf-8")
    with pytest.raises(CacheIOError):
        store.load()


def test_save_into_missing_directory(tmp_path):
    store = JsonCacheStore(tmp_path / "nested" / "cache.json", tmp_path / "nested" / "meta.json")
    store.save(_records(), _metadata(hours_ago=0))
    assert store.has_snapshot()
    assert store.is_valid()


# ── Partial progress ─────────────────────────────────────────────────


def test_partial_roundtrip_and_clear(store: JsonCacheStore):
    assert store.load_partial() is None

    store.save_partial(_records()[:1])
    assert store.partial_path.name == "embedded-resources.json.partial"
    assert [r.title for r in store.load_partial()] == ["Docking"]

    store.clear_partial()
    assert store.load_partial() is None
    store.clear_partial()  # idempotent


def test_empty_partial_is_distinct_from_missing(store: JsonCacheStore):
    store.save_partial([])
    assert store.load_partial() == []
