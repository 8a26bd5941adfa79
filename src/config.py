"""Service configuration.

A single immutable `Configuration` snapshot lives in a process-wide slot.
Readers grab the current reference; reloads build a new snapshot and swap
it in under the lock.
"""

import os
import threading
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Configuration:
    mattermost_url: str
    bot_token: str
    command_token: str | None = None
    team_id: str | None = None
    callback_url: str | None = None
    plugin_id: str = "silencer"
    data_dir: str = "./data"
    reload_minutes: int = 5

    def is_valid(self):
        """Raise ValueError listing every problem with this configuration."""
        problems = []
        if not self.mattermost_url:
            problems.append("MATTERMOST_URL is not set")
        elif not self.mattermost_url.startswith(("http://", "https://")):
            problems.append("MATTERMOST_URL must start with http:// or https://")
        if not self.bot_token:
            problems.append("MATTERMOST_BOT_TOKEN is not set")
        if self.team_id and not self.callback_url:
            problems.append("SILENCER_CALLBACK_URL is required when MATTERMOST_TEAM_ID is set")
        if not self.plugin_id:
            problems.append("SILENCER_PLUGIN_ID must not be empty")
        if self.reload_minutes < 0:
            problems.append("CONFIG_RELOAD_MINUTES must be >= 0")
        if problems:
            raise ValueError("Invalid configuration: " + "; ".join(problems))


def _optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def load_configuration() -> Configuration:
    """Build a snapshot from the environment (and .env, if present)."""
    load_dotenv(override=True)
    return Configuration(
        mattermost_url=os.getenv("MATTERMOST_URL", "").strip().rstrip("/"),
        bot_token=os.getenv("MATTERMOST_BOT_TOKEN", "").strip(),
        command_token=_optional("MATTERMOST_COMMAND_TOKEN"),
        team_id=_optional("MATTERMOST_TEAM_ID"),
        callback_url=_optional("SILENCER_CALLBACK_URL"),
        plugin_id=os.getenv("SILENCER_PLUGIN_ID", "silencer").strip(),
        data_dir=os.getenv("DATA_DIR", "./data"),
        reload_minutes=int(os.getenv("CONFIG_RELOAD_MINUTES", "5")),
    )


_configuration_lock = threading.Lock()
_configuration: Configuration | None = None


def get_configuration() -> Configuration:
    """Return the active snapshot, loading it from the environment on first use."""
    global _configuration
    with _configuration_lock:
        if _configuration is None:
            _configuration = load_configuration()
        return _configuration


def set_configuration(configuration: Configuration):
    global _configuration
    with _configuration_lock:
        _configuration = configuration


def reload_configuration() -> Configuration:
    """Load, validate and swap in a fresh snapshot.

    Raises ValueError (and keeps the previous snapshot) if the new one is invalid.
    """
    configuration = load_configuration()
    configuration.is_valid()
    set_configuration(configuration)
    return configuration
