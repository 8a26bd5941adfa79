"""Block list persistence in the host key/value store."""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.errors import DecodeError, PersistError
from src.silencer.notify import NotificationPublisher

if TYPE_CHECKING:
    from src.host import PluginAPI


@dataclass(frozen=True)
class BlockListKey:
    """KV key for one owner's block list: `<owner_id>-block-list`."""
    owner_id: str

    SUFFIX = "-block-list"

    def __str__(self) -> str:
        return f"{self.owner_id}{self.SUFFIX}"


def decode_block_list(raw: bytes) -> list[str]:
    """Decode a stored list. JSON null counts as empty."""
    try:
        value = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError("Unable to read silencer list") from e
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(name, str) for name in value):
        raise DecodeError("Unable to read silencer list")
    return value


class SilencerStore:
    """Reads and writes block lists.

    Every successful read and every successful write publishes the list to
    the owner's sessions, so clients also refresh when a user merely looks at it.
    """

    def __init__(self, api: "PluginAPI", publisher: NotificationPublisher | None = None):
        self.api = api
        self.publisher = publisher or NotificationPublisher(api)

    async def read(self, owner_id: str) -> list[str]:
        key = str(BlockListKey(owner_id))
        raw = await self.api.kv_get(key)
        if raw is None:
            print(f"· no stored list for {owner_id}, using empty list", flush=True)
            block_list = []
        else:
            try:
                block_list = decode_block_list(raw)
            except DecodeError:
                print(f"❌ stored value at {key} is not a list of usernames", flush=True)
                raise

        await self.publisher.publish(owner_id, block_list)
        return block_list

    async def write(self, owner_id: str, block_list: list[str]):
        """Store the list. Raises PersistError, in which case nothing is published."""
        key = str(BlockListKey(owner_id))
        try:
            await self.api.kv_set(key, json.dumps(block_list).encode("utf-8"))
        except PersistError as e:
            print(f"❌ Unable to save to kv store: {e}", flush=True)
            raise

        await self.publisher.publish(owner_id, block_list)
