"""
/ws -- Live requirements board.

One socket per browser tab. On connect the client gets the full registry
(`database`); after that it sends events and receives replies or
`databaseUpdate` broadcasts. All frames are JSON text.
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from bulletin.connections import describe
from bulletin.protocol import BoardProtocol

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def board_socket(websocket: WebSocket) -> None:
    protocol: BoardProtocol = websocket.app.state.board
    await protocol.connect(websocket)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            text = message.get("text")
            if text is None:
                logger.debug("Ignoring binary frame from %s", describe(websocket))
                continue
            await protocol.handle(websocket, text)
    except WebSocketDisconnect:
        pass
    finally:
        protocol.disconnect(websocket)
