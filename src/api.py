"""FastAPI server for the /silencer slash command."""

import hmac
import json
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from dotenv import load_dotenv
from fastapi import FastAPI, Request, HTTPException, WebSocket, WebSocketDisconnect, status

load_dotenv(override=True)

from src.commands import activate, dispatch_command
from src.config import get_configuration, reload_configuration
from src.errors import ResolutionError
from src.host import MattermostPluginAPI, PluginAPI
from src.hub import WebSocketHub
from src.kvstore import FileKVStore


hub = WebSocketHub()

# Settings read once in lifespan
RESTART_ONLY_SETTINGS = ("data_dir", "reload_minutes")


async def scheduled_reload():
    """Re-read configuration; keep the current snapshot if the new one is invalid.

    DATA_DIR and CONFIG_RELOAD_MINUTES are bound at startup; changing them
    takes a restart.
    """
    previous = get_configuration()
    try:
        configuration = reload_configuration()
    except ValueError as e:
        print(f"⚠️ Configuration reload rejected, keeping previous: {e}", flush=True)
        return
    print("· Configuration reloaded", flush=True)
    for name in RESTART_ONLY_SETTINGS:
        if getattr(configuration, name) != getattr(previous, name):
            print(f"⚠️ {name} changed; restart to apply it", flush=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """App lifespan handler."""
    print("🚀 Silencer API starting...", flush=True)
    configuration = reload_configuration()

    api = MattermostPluginAPI(FileKVStore(configuration.data_dir), hub)
    app.state.plugin_api = api
    await activate(api)

    scheduler = None
    if configuration.reload_minutes:
        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            scheduled_reload,
            trigger=IntervalTrigger(minutes=configuration.reload_minutes),
            id="config_reload",
            name=f"Reload configuration every {configuration.reload_minutes} minutes",
            replace_existing=True,
        )
        scheduler.start()
        print(f"⏰ Scheduler started: config reload every {configuration.reload_minutes} minutes", flush=True)

    yield

    if scheduler:
        scheduler.shutdown()
    print("👋 Shutting down...", flush=True)


app = FastAPI(
    title="User Silencer",
    description="Per-user mute lists for Mattermost via the /silencer slash command",
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


def _verify_token(token: str | None) -> bool:
    """Verify the slash command token Mattermost sends with every request."""
    expected = get_configuration().command_token
    if not expected:
        return True  # Skip verification if no token configured
    if not token:
        return False
    return hmac.compare_digest(expected, token)


async def _read_payload(request: Request) -> dict:
    if request.headers.get("content-type", "").startswith("application/json"):
        return await request.json()
    form = await request.form()
    return dict(form)


@app.post("/command")
async def execute_command(request: Request):
    """Handle a slash command invocation from Mattermost."""
    try:
        payload = await _read_payload(request)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Malformed payload")

    if not _verify_token(payload.get("token")):
        print("❌ [CMD] Token verification failed", flush=True)
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(status_code=400, detail="Missing user_id")

    command = f"{payload.get('command', '')} {payload.get('text', '')}".strip()
    print(f"· [CMD] {user_id}: \"{command[:50]}{'...' if len(command) > 50 else ''}\"", flush=True)

    api: PluginAPI = request.app.state.plugin_api
    result = await dispatch_command(command, user_id, api)
    return result.to_response()


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Clients connect here with their Mattermost session token to receive their own list updates."""
    token = websocket.query_params.get("token")
    authorization = websocket.headers.get("authorization", "")
    if not token and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        print("❌ [WS] Connection without session token rejected", flush=True)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    api: PluginAPI = websocket.app.state.plugin_api
    try:
        user = await api.authenticate(token)
    except ResolutionError as e:
        print(f"❌ [WS] Session token rejected: {e}", flush=True)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await hub.connect(websocket, user.id)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        hub.disconnect(websocket, user.id)


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the API server."""
    import uvicorn
    print(f"🚀 Starting server on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    run_server()
