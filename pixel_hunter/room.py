from __future__ import annotations

import asyncio
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from .constants import MAX_PLAYERS, SLOT_IDS
from .schemas import PlayerState, RoomConfig, RoomDetail, RoomSummary
from .session import ConnectionSession

# NOTE: ``Room`` only holds runtime state and relay helpers. The rules that
# move a room between phases live in ``pixel_hunter.game_logic``.


class GamePhase(str, Enum):
    WAITING = "waiting"
    COUNTDOWN = "countdown"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Room:
    """Runtime state and live connections for one two-player match."""

    def __init__(self, room_id: str, config: Optional[RoomConfig] = None):
        self.room_id = room_id
        self.config = config or RoomConfig()
        self.phase = GamePhase.WAITING
        # connection id -> player state / session
        self.players: Dict[str, PlayerState] = {}
        self.connections: Dict[str, ConnectionSession] = {}
        # Pending countdown; fires game_start unless superseded
        self.countdown_task: Optional[asyncio.Task] = None

    # ---------------------------------------------------------------------
    # Occupancy
    # ---------------------------------------------------------------------

    @property
    def game_started(self) -> bool:
        return self.phase == GamePhase.IN_PROGRESS

    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    def is_empty(self) -> bool:
        return not self.players

    def free_slot(self) -> Optional[str]:
        """Return the first unoccupied slot label (A before B)."""
        taken = {p.player_id for p in self.players.values()}
        for slot in SLOT_IDS:
            if slot not in taken:
                return slot
        return None

    def add_player(self, session: ConnectionSession) -> PlayerState:
        slot = self.free_slot()
        if slot is None:
            raise ValueError(f"Room {self.room_id} has no free slot")
        player = PlayerState(player_id=slot)
        self.players[session.connection_id] = player
        self.connections[session.connection_id] = session
        session.bind(self.room_id, slot)
        return player

    def remove_player(self, connection_id: str) -> Optional[PlayerState]:
        self.connections.pop(connection_id, None)
        return self.players.pop(connection_id, None)

    def all_ready(self) -> bool:
        """Both slots are occupied and every occupant has readied up."""
        return len(self.players) == MAX_PLAYERS and all(p.ready for p in self.players.values())

    def reset_players(self) -> None:
        for player in self.players.values():
            player.reset()

    def final_scores(self) -> Dict[str, int]:
        return {p.player_id: p.score for p in self.players.values()}

    # ---------------------------------------------------------------------
    # Countdown bookkeeping
    # ---------------------------------------------------------------------

    def cancel_countdown(self) -> None:
        task = self.countdown_task
        self.countdown_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    # ---------------------------------------------------------------------
    # Relay helpers
    # ---------------------------------------------------------------------

    async def broadcast(self, message: BaseModel) -> None:
        """Send a convergence *message* to every occupant, sender included."""
        for session in list(self.connections.values()):
            await session.send(message)

    async def relay(self, sender_id: str, message: BaseModel) -> None:
        """Send an opponent-delta *message* to everyone except *sender_id*."""
        for connection_id, session in list(self.connections.items()):
            if connection_id != sender_id:
                await session.send(message)

    # ---------------------------------------------------------------------
    # Inspection
    # ---------------------------------------------------------------------

    def summary(self) -> RoomSummary:
        return RoomSummary(room_id=self.room_id, player_count=len(self.players), phase=self.phase.value)

    def detail(self) -> RoomDetail:
        players: List[PlayerState] = sorted(
            (p.model_copy() for p in self.players.values()), key=lambda p: p.player_id
        )
        return RoomDetail(room_id=self.room_id, phase=self.phase.value, players=players, config=self.config)

    def __repr__(self) -> str:
        return f"Room({self.room_id!r}, phase={self.phase.value}, players={len(self.players)})"


__all__ = ["GamePhase", "Room"]
