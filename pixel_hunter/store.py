"""In-memory room registry.

The store is the only owner of live ``Room`` objects. It starts empty, is
never persisted, and is only touched from the event loop thread, so it needs
no locking.
"""
from __future__ import annotations

import random
from typing import Callable, Dict, Iterator, Optional

from .constants import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH, ROOM_CODE_MAX_ATTEMPTS
from .exceptions import RoomCodeExhausted
from .logging_config import get_logger
from .room import Room
from .schemas import RoomConfig

logger = get_logger(__name__)


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    """Return a random uppercase base-36 code, e.g. ``"X1Y2Z3"``."""
    return "".join(random.choices(ROOM_CODE_ALPHABET, k=length))


class RoomStore:
    def __init__(
        self,
        default_config: Optional[RoomConfig] = None,
        code_factory: Callable[[], str] = generate_room_code,
        max_attempts: int = ROOM_CODE_MAX_ATTEMPTS,
    ):
        self._rooms: Dict[str, Room] = {}
        self.default_config = default_config or RoomConfig()
        self._code_factory = code_factory
        self._max_attempts = max_attempts

    # ---------- public API ---------- #

    def create(self, config: Optional[RoomConfig] = None) -> Room:
        """Register an empty room under a code no live room is using."""
        room_id = self._fresh_code()
        room = Room(room_id, config or self.default_config)
        self._rooms[room_id] = room
        logger.info(f"Room {room_id} created ({len(self._rooms)} live)")
        return room

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id.upper())

    def remove(self, room_id: str) -> None:
        room = self._rooms.pop(room_id.upper(), None)
        if room is not None:
            room.cancel_countdown()
            logger.info(f"Room {room.room_id} deleted ({len(self._rooms)} live)")

    def __contains__(self, room_id: object) -> bool:
        return isinstance(room_id, str) and room_id.upper() in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    # ---------- helpers ---------- #

    def _fresh_code(self) -> str:
        for _ in range(self._max_attempts):
            code = self._code_factory()
            if code not in self._rooms:
                return code
            logger.warning(f"Room code collision on {code}, regenerating")
        raise RoomCodeExhausted(self._max_attempts)


__all__ = ["RoomStore", "generate_room_code"]
