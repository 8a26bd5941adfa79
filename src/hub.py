"""WebSocket fan-out for per-user events."""

from fastapi import WebSocket


class WebSocketHub:
    """Tracks each user's connected clients and sends JSON events to them.

    Delivery is best effort: a client whose send fails is dropped.
    """

    def __init__(self):
        self.connections: dict[str, set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        await websocket.accept()
        self.add(websocket, user_id)
        print(f"· [WS] client connected for {user_id} ({len(self.connections[user_id])} open)", flush=True)

    def add(self, websocket: WebSocket, user_id: str):
        self.connections.setdefault(user_id, set()).add(websocket)

    def disconnect(self, websocket: WebSocket, user_id: str):
        sockets = self.connections.get(user_id)
        if sockets is None:
            return
        sockets.discard(websocket)
        if not sockets:
            del self.connections[user_id]

    async def send_to_user(self, user_id: str, message: dict):
        for websocket in list(self.connections.get(user_id, ())):
            try:
                await websocket.send_json(message)
            except Exception as e:
                print(f"⚠️ [WS] dropping client of {user_id} after failed send: {e}", flush=True)
                self.disconnect(websocket, user_id)
