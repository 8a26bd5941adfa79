"""Tests for the file-backed KV store."""

import pytest

from src.kvstore import FileKVStore, STORE_FILE


class TestFileKVStore:

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, temp_data_dir):
        store = FileKVStore(temp_data_dir)

        assert await store.get("alice-id-block-list") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, temp_data_dir):
        store = FileKVStore(temp_data_dir)

        await store.set("alice-id-block-list", b'["bob"]')

        assert await store.get("alice-id-block-list") == b'["bob"]'

    @pytest.mark.asyncio
    async def test_values_survive_a_new_instance(self, temp_data_dir):
        await FileKVStore(temp_data_dir).set("k", b"\x00\xffbinary")

        assert await FileKVStore(temp_data_dir).get("k") == b"\x00\xffbinary"

    @pytest.mark.asyncio
    async def test_overwrite_keeps_other_keys(self, temp_data_dir):
        store = FileKVStore(temp_data_dir)
        await store.set("a", b"1")
        await store.set("b", b"2")
        await store.set("a", b"3")

        assert await store.get("a") == b"3"
        assert await store.get("b") == b"2"

    @pytest.mark.asyncio
    async def test_creates_data_dir_on_first_write(self, tmp_path):
        data_dir = tmp_path / "nested" / "data"
        store = FileKVStore(data_dir)

        await store.set("k", b"v")

        assert (data_dir / STORE_FILE).exists()
        assert not (data_dir / "kv_store.tmp").exists()
