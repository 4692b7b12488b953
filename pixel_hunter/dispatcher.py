"""Inbound message routing.

``ProtocolDispatcher`` is the single entry point used by the WebSocket
endpoint: one call per received frame, plus ``disconnect`` when the socket
closes. It owns no state of its own beyond the injected ``RoomStore``.
"""
from __future__ import annotations

import json
from typing import Optional

from pydantic import ValidationError

from . import game_logic
from .config import Settings
from .exceptions import (
    AlreadyInRoom,
    GameAlreadyStarted,
    MalformedMessage,
    NotInRoom,
    PixelHunterException,
    RoomFull,
    RoomNotFound,
)
from .logging_config import get_logger
from .room import GamePhase, Room
from .schemas import (
    CreateRoomMessage,
    ErrorMessage,
    JoinRoomMessage,
    PlayerJoined,
    ReadyMessage,
    RestartMessage,
    RoomCreated,
    RoomJoined,
    ScoreMessage,
    WrongMessage,
    inbound_adapter,
)
from .session import ConnectionSession
from .store import RoomStore

logger = get_logger(__name__)


def decode_message(raw):
    """Parse one frame into an inbound message model.

    Raises ``MalformedMessage`` for anything that is not a JSON object with a
    known ``type`` and the fields that type requires.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedMessage(f"Frame is not UTF-8: {exc}") from exc
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedMessage(f"Frame is not JSON: {exc}") from exc
    if not isinstance(data, dict) or "type" not in data:
        raise MalformedMessage("Frame has no 'type'")
    try:
        return inbound_adapter.validate_python(data)
    except ValidationError as exc:
        raise MalformedMessage(f"Invalid {data.get('type')!r} message: {exc.error_count()} error(s)") from exc


class ProtocolDispatcher:
    def __init__(self, store: RoomStore, settings: Settings):
        self.store = store
        self.settings = settings

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle_raw(self, session: ConnectionSession, raw) -> None:
        try:
            message = decode_message(raw)
        except MalformedMessage as exc:
            logger.debug(f"Discarding frame from {session.connection_id}: {exc.message}")
            return
        await self.handle_message(session, message)

    async def handle_message(self, session: ConnectionSession, message) -> None:
        try:
            if isinstance(message, CreateRoomMessage):
                await self.handle_create_room(session)
            elif isinstance(message, JoinRoomMessage):
                await self.handle_join_room(session, message.room_id)
            elif isinstance(message, ReadyMessage):
                await self.handle_ready(session)
            elif isinstance(message, ScoreMessage):
                await self.handle_score(session, message.score, message.level)
            elif isinstance(message, WrongMessage):
                await self.handle_wrong(session)
            elif isinstance(message, RestartMessage):
                await self.handle_restart(session)
        except PixelHunterException as exc:
            logger.info(f"Rejected {message.type} from {session.connection_id}: {exc.message}")
            await session.send(ErrorMessage(message=exc.message))

    async def disconnect(self, session: ConnectionSession) -> None:
        session.closed = True
        await self._leave_current_room(session)

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    async def handle_create_room(self, session: ConnectionSession) -> Room:
        await self._leave_current_room(session)
        room = self.store.create()
        player = room.add_player(session)
        await session.send(RoomCreated(room_id=room.room_id, player_id=player.player_id))
        return room

    async def handle_join_room(self, session: ConnectionSession, room_id: str) -> Room:
        room_id = room_id.strip().upper()
        room = self.store.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        if session.room_id == room.room_id:
            raise AlreadyInRoom(room.room_id)
        if room.is_full():
            raise RoomFull(room.room_id)
        if room.phase in (GamePhase.COUNTDOWN, GamePhase.IN_PROGRESS):
            raise GameAlreadyStarted(room.room_id)

        await self._leave_current_room(session)
        # Leaving our previous room awaited sends; re-check admission
        if self.store.get(room.room_id) is not room or room.is_full():
            raise RoomFull(room.room_id)

        player = room.add_player(session)
        logger.info(f"Connection {session.connection_id} joined room {room.room_id} as {player.player_id}")
        await session.send(RoomJoined(room_id=room.room_id, player_id=player.player_id))
        await room.relay(session.connection_id, PlayerJoined(player_id=player.player_id))
        return room

    async def handle_ready(self, session: ConnectionSession) -> None:
        room = self._require_room(session)
        await game_logic.mark_ready(self.store, room, session.connection_id, self.settings.countdown_seconds)

    async def handle_score(self, session: ConnectionSession, score: int, level: int) -> None:
        room = self._require_room(session)
        await game_logic.apply_score(room, session.connection_id, score, level)

    async def handle_wrong(self, session: ConnectionSession) -> None:
        room = self._require_room(session)
        await game_logic.relay_wrong(room, session.connection_id)

    async def handle_restart(self, session: ConnectionSession) -> None:
        room = self._require_room(session)
        await game_logic.restart_game(room)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_room(self, session: ConnectionSession) -> Room:
        room = self._current_room(session)
        if room is None:
            raise NotInRoom()
        return room

    def _current_room(self, session: ConnectionSession) -> Optional[Room]:
        if session.room_id is None:
            return None
        room = self.store.get(session.room_id)
        if room is None or session.connection_id not in room.players:
            session.unbind()
            return None
        return room

    async def _leave_current_room(self, session: ConnectionSession) -> None:
        room = self._current_room(session)
        session.unbind()
        if room is not None:
            await game_logic.handle_departure(self.store, room, session.connection_id)


__all__ = ["ProtocolDispatcher", "decode_message"]
