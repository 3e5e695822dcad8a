"""Tests for the in-memory and file-backed record stores."""

import json
import os
import stat
from unittest.mock import patch

import pytest

from shared.storage import FileRecordStore, MemoryRecordStore


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryRecordStore()
    return FileRecordStore(tmp_path / "data")


class TestRecordStoreContract:
    async def test_unknown_collection_is_empty(self, store):
        assert await store.get("games") == []

    async def test_put_then_get(self, store):
        await store.put("players", {"id": "p1", "name": "Ann"})
        assert await store.get("players") == [{"id": "p1", "name": "Ann"}]

    async def test_put_replaces_by_id_keeping_order(self, store):
        await store.put("players", {"id": "p1", "name": "Ann"})
        await store.put("players", {"id": "p2", "name": "Bo"})
        await store.put("players", {"id": "p1", "name": "Anna"})

        assert await store.get("players") == [
            {"id": "p1", "name": "Anna"},
            {"id": "p2", "name": "Bo"},
        ]

    async def test_collections_are_independent(self, store):
        await store.put("players", {"id": "x"})
        await store.put("games", {"id": "x", "isEnded": False})
        await store.delete("players", "x")

        assert await store.get("players") == []
        assert await store.get("games") == [{"id": "x", "isEnded": False}]

    async def test_delete_absent_is_noop(self, store):
        await store.put("games", {"id": "g1"})
        await store.delete("games", "g2")
        assert await store.get("games") == [{"id": "g1"}]

    @pytest.mark.parametrize("collection", ["", "Games", "../games", "games.json"])
    async def test_rejects_invalid_collection_names(self, store, collection):
        with pytest.raises(ValueError, match="Invalid collection name"):
            await store.get(collection)

    @pytest.mark.parametrize("record", [{}, {"id": ""}, {"id": 7}])
    async def test_rejects_records_without_string_id(self, store, record):
        with pytest.raises(ValueError, match="non-empty string 'id'"):
            await store.put("games", record)

    async def test_returned_records_are_not_aliased(self, store):
        await store.put("games", {"id": "g1", "rounds": []})
        loaded = await store.get("games")
        loaded[0]["rounds"].append({"id": 1})

        assert await store.get("games") == [{"id": "g1", "rounds": []}]


class TestFileRecordStore:
    async def test_writes_one_json_array_per_collection(self, tmp_path):
        store = FileRecordStore(tmp_path)
        await store.put("players", {"id": "p1", "name": "Ann"})

        content = json.loads((tmp_path / "players.json").read_text(encoding="utf-8"))
        assert content == [{"id": "p1", "name": "Ann"}]

    async def test_persists_across_instances(self, tmp_path):
        await FileRecordStore(tmp_path).put("games", {"id": "g1"})
        assert await FileRecordStore(tmp_path).get("games") == [{"id": "g1"}]

    async def test_owner_only_permissions(self, tmp_path):
        data_dir = tmp_path / "data"
        await FileRecordStore(data_dir).put("games", {"id": "g1"})

        assert stat.S_IMODE(os.stat(data_dir / "games.json").st_mode) == 0o600
        assert stat.S_IMODE(os.stat(data_dir).st_mode) == 0o700

    async def test_no_temp_files_left_behind(self, tmp_path):
        store = FileRecordStore(tmp_path)
        await store.put("games", {"id": "g1"})
        await store.put("games", {"id": "g2"})

        assert [p.name for p in tmp_path.iterdir()] == ["games.json"]

    async def test_corrupt_file_raises_and_is_not_overwritten(self, tmp_path):
        (tmp_path / "games.json").write_text("{not json", encoding="utf-8")
        store = FileRecordStore(tmp_path)

        with pytest.raises(OSError, match="Failed to load collection"):
            await store.get("games")
        with pytest.raises(OSError, match="Failed to load collection"):
            await store.put("games", {"id": "g1"})
        assert (tmp_path / "games.json").read_text(encoding="utf-8") == "{not json"

    async def test_non_array_file_raises(self, tmp_path):
        (tmp_path / "games.json").write_text('{"id": "g1"}', encoding="utf-8")

        with pytest.raises(OSError, match="Expected JSON array of objects"):
            await FileRecordStore(tmp_path).get("games")

    async def test_failed_write_cleans_up_temp_file(self, tmp_path):
        store = FileRecordStore(tmp_path)
        await store.put("games", {"id": "g1"})

        with (
            patch("shared.storage.os.fsync", side_effect=OSError("disk full")),
            pytest.raises(OSError, match="disk full"),
        ):
            await store.put("games", {"id": "g2"})

        assert [p.name for p in tmp_path.iterdir()] == ["games.json"]
        assert await store.get("games") == [{"id": "g1"}]
