"""Pydantic data schemas used across the relay.

Wire payloads use camelCase keys (``roomId``, ``playerId``) while the Python
side keeps snake_case attribute names; ``WireModel`` bridges the two. Outbound
messages must be dumped with ``by_alias=True`` (see ``to_wire``).
"""
from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .constants import INITIAL_LEVEL


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def to_wire(message: BaseModel) -> dict:
    return message.model_dump(by_alias=True)


# -----------------------------
# Runtime state
# -----------------------------

class PlayerState(WireModel):
    """One occupant of a room, keyed in ``Room.players`` by connection id."""

    player_id: str  # slot label, "A" or "B"
    ready: bool = False
    score: int = 0
    level: int = INITIAL_LEVEL

    def reset(self) -> None:
        self.ready = False
        self.score = 0
        self.level = INITIAL_LEVEL


class RoomConfig(WireModel):
    """Per-room game tuning. Only *target_level* matters to the relay itself;
    the difficulty values are passed through to clients untouched."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    target_level: int = 15
    diff_start: float = 16
    diff_min: float = 1.2


# -----------------------------
# Inbound messages (client -> relay)
# -----------------------------

class CreateRoomMessage(WireModel):
    type: Literal["create_room"]


class JoinRoomMessage(WireModel):
    type: Literal["join_room"]
    room_id: str


class ReadyMessage(WireModel):
    type: Literal["ready"]


class ScoreMessage(WireModel):
    type: Literal["score"]
    score: int
    level: int


class WrongMessage(WireModel):
    type: Literal["wrong"]


class RestartMessage(WireModel):
    type: Literal["restart"]


InboundMessage = Annotated[
    Union[
        CreateRoomMessage,
        JoinRoomMessage,
        ReadyMessage,
        ScoreMessage,
        WrongMessage,
        RestartMessage,
    ],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter = TypeAdapter(InboundMessage)


# -----------------------------
# Outbound messages (relay -> client)
# -----------------------------

class RoomCreated(WireModel):
    type: Literal["room_created"] = "room_created"
    room_id: str
    player_id: str


class RoomJoined(WireModel):
    type: Literal["room_joined"] = "room_joined"
    room_id: str
    player_id: str


class PlayerJoined(WireModel):
    type: Literal["player_joined"] = "player_joined"
    player_id: str


class PlayerReady(WireModel):
    type: Literal["player_ready"] = "player_ready"
    player_id: str


class CountdownStart(WireModel):
    type: Literal["countdown_start"] = "countdown_start"


class GameStart(WireModel):
    type: Literal["game_start"] = "game_start"


class OpponentScore(WireModel):
    type: Literal["opponent_score"] = "opponent_score"
    player_id: str
    score: int
    level: int


class OpponentWrong(WireModel):
    type: Literal["opponent_wrong"] = "opponent_wrong"
    player_id: str


class GameOver(WireModel):
    type: Literal["game_over"] = "game_over"
    winner: str
    scores: Dict[str, int]


class GameReset(WireModel):
    type: Literal["game_reset"] = "game_reset"


class PlayerLeft(WireModel):
    type: Literal["player_left"] = "player_left"
    player_id: str


class ErrorMessage(WireModel):
    type: Literal["error"] = "error"
    message: str


# -----------------------------
# HTTP inspection models
# -----------------------------

class RoomSummary(WireModel):
    room_id: str
    player_count: int
    phase: str


class RoomDetail(WireModel):
    room_id: str
    phase: str
    players: List[PlayerState]
    config: RoomConfig


__all__ = [
    "WireModel",
    "to_wire",
    # runtime
    "PlayerState",
    "RoomConfig",
    # inbound
    "CreateRoomMessage",
    "JoinRoomMessage",
    "ReadyMessage",
    "ScoreMessage",
    "WrongMessage",
    "RestartMessage",
    "InboundMessage",
    "inbound_adapter",
    # outbound
    "RoomCreated",
    "RoomJoined",
    "PlayerJoined",
    "PlayerReady",
    "CountdownStart",
    "GameStart",
    "OpponentScore",
    "OpponentWrong",
    "GameOver",
    "GameReset",
    "PlayerLeft",
    "ErrorMessage",
    # http
    "RoomSummary",
    "RoomDetail",
]
