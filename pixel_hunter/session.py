from __future__ import annotations

import uuid
from typing import Optional

from fastapi import WebSocket
from pydantic import BaseModel
from starlette.websockets import WebSocketState

from .logging_config import get_logger
from .schemas import to_wire

logger = get_logger(__name__)


class ConnectionSession:
    """Ephemeral state for one live WebSocket connection.

    The session only holds a back-reference (``room_id`` / ``player_id``) to
    the room it joined; the ``Room`` owns the matching ``PlayerState``.
    """

    def __init__(self, websocket: WebSocket, connection_id: Optional[str] = None):
        self.connection_id = connection_id or uuid.uuid4().hex
        self.websocket = websocket
        self.room_id: Optional[str] = None
        self.player_id: Optional[str] = None
        self.closed = False

    def bind(self, room_id: str, player_id: str) -> None:
        self.room_id = room_id
        self.player_id = player_id

    def unbind(self) -> None:
        self.room_id = None
        self.player_id = None

    async def send(self, message: BaseModel) -> None:
        """Send *message* to this connection; a vanished peer is a silent no-op."""
        if self.closed:
            return
        if getattr(self.websocket, "client_state", WebSocketState.CONNECTED) != WebSocketState.CONNECTED:
            return
        try:
            await self.websocket.send_json(to_wire(message))
        except Exception as exc:
            # Peer went away between the state check and the write
            logger.debug(f"Dropped {type(message).__name__} for connection {self.connection_id}: {exc!r}")
            self.closed = True

    def __repr__(self) -> str:
        return f"ConnectionSession({self.connection_id!r}, room={self.room_id!r}, player={self.player_id!r})"


__all__ = ["ConnectionSession"]
