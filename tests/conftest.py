"""Pytest configuration and shared fixtures."""

import os
import pytest

# Set dummy env vars before importing modules that require them
os.environ.setdefault("MATTERMOST_URL", "http://mattermost.test")
os.environ.setdefault("MATTERMOST_BOT_TOKEN", "test-token")
os.environ.setdefault("CONFIG_RELOAD_MINUTES", "0")

from src.errors import PersistError, ResolutionError
from src.host import PluginAPI
from src.mattermost import MattermostUser


class FakePluginAPI(PluginAPI):
    """In-memory host: a user directory, a dict KV store and a list of published events."""

    def __init__(self, users: list[MattermostUser] | None = None):
        self.users = {user.id: user for user in users or []}
        self.kv: dict[str, bytes] = {}
        self.published: list[tuple[str, dict, str]] = []
        self.sessions: dict[str, str] = {}
        self.registered: list[tuple[str, str, str]] = []
        self.fail_kv_get = False
        self.fail_kv_set = False
        self.fail_directory = False

    async def get_user(self, user_id):
        if self.fail_directory or user_id not in self.users:
            raise ResolutionError(f"Unable to get user {user_id}")
        return self.users[user_id]

    async def get_user_by_username(self, username):
        if not self.fail_directory:
            for user in self.users.values():
                if user.username == username:
                    return user
        raise ResolutionError(f"Unable to get user @{username}")

    async def get_users_by_usernames(self, usernames):
        if self.fail_directory:
            raise ResolutionError("Unable to get users")
        # The server answers in its own order, not the requested one
        return [user for user in self.users.values() if user.username in usernames]

    async def authenticate(self, session_token):
        if session_token not in self.sessions:
            raise ResolutionError("Unable to authenticate session")
        return self.users[self.sessions[session_token]]

    async def kv_get(self, key):
        if self.fail_kv_get:
            raise PersistError("Unable to read kv: disk on fire")
        return self.kv.get(key)

    async def kv_set(self, key, value):
        if self.fail_kv_set:
            raise PersistError("Unable to save: disk full")
        self.kv[key] = value

    async def publish_websocket_event(self, event, payload, user_id):
        self.published.append((event, payload, user_id))

    async def register_command(self, trigger, description, hint=""):
        self.registered.append((trigger, description, hint))
        return True


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory for tests."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def users():
    return [
        MattermostUser(id="alice-id", username="alice"),
        MattermostUser(id="bob-id", username="bob"),
        MattermostUser(id="carol-id", username="carol"),
        MattermostUser(id="dave-id", username="dave"),
    ]


@pytest.fixture
def fake_api(users):
    return FakePluginAPI(users)


@pytest.fixture
def reset_configuration():
    """Drop the cached configuration snapshot before and after a test."""
    from src import config
    config.set_configuration(None)
    yield
    config.set_configuration(None)
