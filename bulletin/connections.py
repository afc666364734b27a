"""Open WebSocket connections and fan-out to them."""

import logging

from fastapi import WebSocket

from bulletin.models.schemas import ServerMessage

logger = logging.getLogger(__name__)


def describe(websocket: WebSocket) -> str:
    """Short label for log lines, e.g. 127.0.0.1:53122."""
    client = websocket.client
    if client is None:
        return f"ws-{id(websocket):x}"
    return f"{client.host}:{client.port}"


class ConnectionManager:
    """Tracks every open socket, plus which of them have logged in as admin."""

    def __init__(self):
        self._clients: set[WebSocket] = set()
        self._admins: set[WebSocket] = set()

    def __len__(self) -> int:
        return len(self._clients)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._clients.add(websocket)
        logger.info("client connected %s (open: %d)", describe(websocket), len(self._clients))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket not in self._clients:
            return
        self._clients.discard(websocket)
        self._admins.discard(websocket)
        logger.info("client disconnected %s (open: %d)", describe(websocket), len(self._clients))

    def mark_admin(self, websocket: WebSocket) -> None:
        if websocket in self._clients:
            self._admins.add(websocket)

    def is_admin(self, websocket: WebSocket) -> bool:
        return websocket in self._admins

    async def send(self, websocket: WebSocket, message: ServerMessage) -> None:
        await websocket.send_text(message.model_dump_json())

    async def broadcast(self, message: ServerMessage) -> int:
        """Send to every open connection, sender included. Returns how many got it."""
        text = message.model_dump_json()
        delivered = 0
        dead: list[WebSocket] = []

        # Iterate over a copy: a disconnect can land while we're awaiting a send.
        for websocket in list(self._clients):
            try:
                await websocket.send_text(text)
                delivered += 1
            except Exception as e:
                logger.warning("Dropping %s after failed send: %s", describe(websocket), e)
                dead.append(websocket)

        for websocket in dead:
            self.disconnect(websocket)
        return delivered
