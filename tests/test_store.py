"""Tests for block list persistence and notifications."""

import json
import pytest

from src.errors import DecodeError, PersistError
from src.silencer import BlockListKey, LIST_CHANGED_EVENT, SilencerStore


class TestBlockListKey:
    """Tests for the per-owner KV key."""

    def test_key_format(self):
        assert str(BlockListKey("abc123")) == "abc123-block-list"

    def test_distinct_owners_get_distinct_keys(self):
        keys = {str(BlockListKey(owner)) for owner in ["a", "a-block-list", "b", ""]}
        assert len(keys) == 4


class TestRead:
    """Tests for SilencerStore.read."""

    @pytest.mark.asyncio
    async def test_missing_key_reads_as_empty_list(self, fake_api):
        store = SilencerStore(fake_api)

        assert await store.read("alice-id") == []

    @pytest.mark.asyncio
    async def test_reads_stored_list_in_order(self, fake_api):
        fake_api.kv["alice-id-block-list"] = json.dumps(["carol", "bob"]).encode()
        store = SilencerStore(fake_api)

        assert await store.read("alice-id") == ["carol", "bob"]

    @pytest.mark.asyncio
    async def test_malformed_value_raises_decode_error(self, fake_api):
        fake_api.kv["alice-id-block-list"] = b"not json"
        store = SilencerStore(fake_api)

        with pytest.raises(DecodeError):
            await store.read("alice-id")

        # Left untouched, nothing published
        assert fake_api.kv["alice-id-block-list"] == b"not json"
        assert fake_api.published == []

    @pytest.mark.asyncio
    async def test_non_string_entries_raise_decode_error(self, fake_api):
        fake_api.kv["alice-id-block-list"] = b'["bob", 42]'
        store = SilencerStore(fake_api)

        with pytest.raises(DecodeError):
            await store.read("alice-id")

    @pytest.mark.asyncio
    async def test_json_object_raises_decode_error(self, fake_api):
        fake_api.kv["alice-id-block-list"] = b'{"list": ["bob"]}'
        store = SilencerStore(fake_api)

        with pytest.raises(DecodeError):
            await store.read("alice-id")

    @pytest.mark.asyncio
    async def test_json_null_reads_as_empty_list(self, fake_api):
        fake_api.kv["alice-id-block-list"] = b"null"
        store = SilencerStore(fake_api)

        assert await store.read("alice-id") == []

    @pytest.mark.asyncio
    async def test_read_publishes_list(self, fake_api):
        fake_api.kv["alice-id-block-list"] = b'["bob"]'
        store = SilencerStore(fake_api)

        await store.read("alice-id")

        assert fake_api.published == [(LIST_CHANGED_EVENT, {"list": ["bob"]}, "alice-id")]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, fake_api):
        fake_api.fail_kv_get = True
        store = SilencerStore(fake_api)

        with pytest.raises(PersistError):
            await store.read("alice-id")
        assert fake_api.published == []


class TestWrite:
    """Tests for SilencerStore.write."""

    @pytest.mark.asyncio
    async def test_write_stores_json_array(self, fake_api):
        store = SilencerStore(fake_api)

        await store.write("alice-id", ["bob", "carol"])

        assert json.loads(fake_api.kv["alice-id-block-list"]) == ["bob", "carol"]

    @pytest.mark.asyncio
    async def test_write_publishes_new_list(self, fake_api):
        store = SilencerStore(fake_api)

        await store.write("alice-id", ["bob"])

        assert fake_api.published == [("silencer_list_changed", {"list": ["bob"]}, "alice-id")]

    @pytest.mark.asyncio
    async def test_failed_write_does_not_publish(self, fake_api):
        fake_api.fail_kv_set = True
        store = SilencerStore(fake_api)

        with pytest.raises(PersistError):
            await store.write("alice-id", ["bob"])

        assert fake_api.published == []
        assert "alice-id-block-list" not in fake_api.kv

    @pytest.mark.asyncio
    async def test_owners_do_not_share_lists(self, fake_api):
        store = SilencerStore(fake_api)

        await store.write("alice-id", ["bob"])
        await store.write("bob-id", ["carol"])

        assert await store.read("alice-id") == ["bob"]
        assert await store.read("bob-id") == ["carol"]
