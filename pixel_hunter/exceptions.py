"""Protocol and room-lifecycle exceptions.

Everything the dispatcher can reject derives from ``PixelHunterException`` so
the WebSocket layer only needs a single ``except`` to turn a failure into an
``error`` reply.
"""
from __future__ import annotations


class PixelHunterException(Exception):
    """Base class for every recoverable relay error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# -----------------------------
# Room lookup / admission
# -----------------------------

class RoomNotFound(PixelHunterException):
    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class RoomFull(PixelHunterException):
    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Room {room_id} is full")


class GameAlreadyStarted(PixelHunterException):
    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Game in room {room_id} has already started")


class AlreadyInRoom(PixelHunterException):
    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Already in room {room_id}")


class NotInRoom(PixelHunterException):
    """The connection sent a room action without being bound to a room."""

    def __init__(self):
        super().__init__("Not in a room")


class RoomCodeExhausted(PixelHunterException):
    """No free room code was found within the retry budget."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a free room code after {attempts} attempts")


# -----------------------------
# Wire decoding
# -----------------------------

class MalformedMessage(PixelHunterException):
    """Inbound frame could not be decoded; never reported to the client."""
    pass


__all__ = [
    "PixelHunterException",
    "RoomNotFound",
    "RoomFull",
    "GameAlreadyStarted",
    "AlreadyInRoom",
    "NotInRoom",
    "RoomCodeExhausted",
    "MalformedMessage",
]
