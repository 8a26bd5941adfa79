"""Mattermost REST API client for user lookups and command registration."""

import re
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from src.config import get_configuration


API_PREFIX = "/api/v4"

# Mattermost ids and usernames only use these characters
_SEGMENT_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


@dataclass
class MattermostUser:
    id: str
    username: str
    first_name: str = ""
    last_name: str = ""
    nickname: str = ""


@dataclass
class MattermostCommand:
    id: str
    trigger: str
    team_id: str
    url: str


def _headers(token: str | None = None) -> dict:
    token = token or get_configuration().bot_token
    if not token:
        raise ValueError("MATTERMOST_BOT_TOKEN environment variable is not set")
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


def _path_segment(value: str) -> str:
    """Validate and escape a single id or username for use in a request path."""
    if not _SEGMENT_RE.fullmatch(value):
        raise ValueError(f"Invalid id or username: {value!r}")
    return quote(value, safe="")


def _url(path: str) -> str:
    return f"{get_configuration().mattermost_url}{API_PREFIX}{path}"


async def _request(method: str, path: str, token: str | None = None, **kwargs) -> dict | list:
    """Call the Mattermost API and return the decoded JSON body.

    Uses the bot token unless `token` is given.
    """
    async with httpx.AsyncClient() as client:
        response = await client.request(
            method,
            _url(path),
            headers=_headers(token),
            timeout=30,
            **kwargs,
        )
        response.raise_for_status()
        return response.json()


def _to_user(data: dict) -> MattermostUser:
    return MattermostUser(
        id=data["id"],
        username=data["username"],
        first_name=data.get("first_name", ""),
        last_name=data.get("last_name", ""),
        nickname=data.get("nickname", ""),
    )


async def get_user(user_id: str) -> MattermostUser:
    """Fetch a user by id."""
    data = await _request("GET", f"/users/{_path_segment(user_id)}")
    return _to_user(data)


async def get_user_by_username(username: str) -> MattermostUser:
    """Fetch a user by username."""
    data = await _request("GET", f"/users/username/{_path_segment(username)}")
    return _to_user(data)


async def get_me(session_token: str) -> MattermostUser:
    """Fetch the user a session token belongs to."""
    data = await _request("GET", "/users/me", token=session_token)
    return _to_user(data)


async def get_users_by_usernames(usernames: list[str]) -> list[MattermostUser]:
    """Fetch every user that still exists for the given usernames.

    Unknown usernames are silently left out of the result by the server.
    """
    if not usernames:
        return []
    data = await _request("POST", "/users/usernames", json=usernames)
    return [_to_user(item) for item in data]


async def list_team_commands(team_id: str) -> list[MattermostCommand]:
    """List the custom slash commands registered for a team."""
    data = await _request("GET", "/commands", params={"team_id": team_id, "custom_only": "true"})
    return [
        MattermostCommand(
            id=item["id"],
            trigger=item["trigger"],
            team_id=item["team_id"],
            url=item.get("url", ""),
        )
        for item in data
    ]


async def create_command(
    team_id: str,
    trigger: str,
    url: str,
    auto_complete: bool = True,
    auto_complete_desc: str = "",
    auto_complete_hint: str = "",
) -> MattermostCommand:
    """Create a custom slash command that POSTs to `url`."""
    data = await _request(
        "POST",
        "/commands",
        json={
            "team_id": team_id,
            "trigger": trigger,
            "method": "P",
            "url": url,
            "auto_complete": auto_complete,
            "auto_complete_desc": auto_complete_desc,
            "auto_complete_hint": auto_complete_hint,
        },
    )
    return MattermostCommand(
        id=data["id"],
        trigger=data["trigger"],
        team_id=data["team_id"],
        url=data.get("url", url),
    )
