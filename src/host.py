"""Host capabilities the silencer needs, and their Mattermost-backed implementation."""

from abc import ABC, abstractmethod

import httpx

from src import mattermost
from src.config import get_configuration
from src.errors import PersistError, ResolutionError
from src.hub import WebSocketHub
from src.kvstore import FileKVStore
from src.mattermost import MattermostUser


class PluginAPI(ABC):
    """User directory, key/value store, publish channel and command registry.

    Directory lookups and authentication raise ResolutionError, store calls
    raise PersistError. Publishing never raises.
    """

    @abstractmethod
    async def get_user(self, user_id: str) -> MattermostUser:
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> MattermostUser:
        pass

    @abstractmethod
    async def get_users_by_usernames(self, usernames: list[str]) -> list[MattermostUser]:
        pass

    @abstractmethod
    async def authenticate(self, session_token: str) -> MattermostUser:
        """Return the user a client session token belongs to."""
        pass

    @abstractmethod
    async def kv_get(self, key: str) -> bytes | None:
        pass

    @abstractmethod
    async def kv_set(self, key: str, value: bytes):
        pass

    @abstractmethod
    async def publish_websocket_event(self, event: str, payload: dict, user_id: str):
        """Send an event to the sessions of `user_id` only."""
        pass

    @abstractmethod
    async def register_command(self, trigger: str, description: str, hint: str = "") -> bool:
        """Register a slash command. Returns False if nothing was registered."""
        pass


# Transport failures, rejected URLs and unexpected response shapes
DIRECTORY_ERRORS = (httpx.HTTPError, httpx.InvalidURL, KeyError, TypeError, ValueError)


class MattermostPluginAPI(PluginAPI):
    """PluginAPI over the Mattermost REST API, a file KV store and a WebSocket hub."""

    def __init__(self, kv: FileKVStore, hub: WebSocketHub):
        self.kv = kv
        self.hub = hub

    async def get_user(self, user_id: str) -> MattermostUser:
        try:
            return await mattermost.get_user(user_id)
        except DIRECTORY_ERRORS as e:
            raise ResolutionError(f"Unable to get user {user_id}: {e}") from e

    async def get_user_by_username(self, username: str) -> MattermostUser:
        try:
            return await mattermost.get_user_by_username(username)
        except DIRECTORY_ERRORS as e:
            raise ResolutionError(f"Unable to get user @{username}: {e}") from e

    async def get_users_by_usernames(self, usernames: list[str]) -> list[MattermostUser]:
        try:
            return await mattermost.get_users_by_usernames(usernames)
        except DIRECTORY_ERRORS as e:
            raise ResolutionError(f"Unable to get users: {e}") from e

    async def authenticate(self, session_token: str) -> MattermostUser:
        try:
            return await mattermost.get_me(session_token)
        except DIRECTORY_ERRORS as e:
            raise ResolutionError(f"Unable to authenticate session: {e}") from e

    async def kv_get(self, key: str) -> bytes | None:
        try:
            return await self.kv.get(key)
        except (OSError, ValueError) as e:
            raise PersistError(f"Unable to read kv: {e}") from e

    async def kv_set(self, key: str, value: bytes):
        try:
            await self.kv.set(key, value)
        except (OSError, ValueError) as e:
            raise PersistError(f"Unable to save: {e}") from e

    async def publish_websocket_event(self, event: str, payload: dict, user_id: str):
        await self.hub.send_to_user(user_id, {
            "event": f"custom_{get_configuration().plugin_id}_{event}",
            "data": payload,
            "broadcast": {"user_id": user_id},
        })

    async def register_command(self, trigger: str, description: str, hint: str = "") -> bool:
        configuration = get_configuration()
        team_id = configuration.team_id
        if not team_id:
            print(f"· No MATTERMOST_TEAM_ID set, skipping /{trigger} registration", flush=True)
            return False

        existing = await mattermost.list_team_commands(team_id)
        if any(cmd.trigger == trigger for cmd in existing):
            print(f"· /{trigger} already registered for team {team_id}", flush=True)
            return False

        await mattermost.create_command(
            team_id=team_id,
            trigger=trigger,
            url=configuration.callback_url or "",
            auto_complete=True,
            auto_complete_desc=description,
            auto_complete_hint=hint,
        )
        print(f"✅ Registered /{trigger} for team {team_id}", flush=True)
        return True
