"""Broadcasts of silencer list contents."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.host import PluginAPI


LIST_CHANGED_EVENT = "silencer_list_changed"


class NotificationPublisher:
    """Publishes an owner's current list to that owner's sessions so they can refresh what they hide."""

    def __init__(self, api: "PluginAPI"):
        self.api = api

    async def publish(self, owner_id: str, block_list: list[str]):
        await self.api.publish_websocket_event(LIST_CHANGED_EVENT, {"list": list(block_list)}, owner_id)
