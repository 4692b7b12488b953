"""Core match rules for a Pixel Hunter room.

This module implements the room's game-session state machine
(waiting -> countdown -> in_progress -> finished, back to waiting on restart)
while staying framework-agnostic. Every function works on in-memory
``pixel_hunter.room.Room`` instances; the dispatcher calls them after it has
validated the request.

State is always mutated synchronously before the first ``await`` so that a
message from the other connection, handled while a send is in flight, sees a
consistent room.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from .logging_config import get_logger
from .room import GamePhase, Room
from .schemas import (
    CountdownStart,
    GameOver,
    GameReset,
    GameStart,
    OpponentScore,
    OpponentWrong,
    PlayerLeft,
    PlayerReady,
    PlayerState,
)
from .store import RoomStore

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Readiness & countdown
# ---------------------------------------------------------------------------


async def mark_ready(store: RoomStore, room: Room, connection_id: str, countdown_seconds: float) -> None:
    player = room.players.get(connection_id)
    if player is None:
        return
    player.ready = True

    begin = room.phase == GamePhase.WAITING and room.all_ready()
    if begin:
        room.phase = GamePhase.COUNTDOWN
        logger.info(f"Room {room.room_id} counting down ({countdown_seconds}s)")

    await room.broadcast(PlayerReady(player_id=player.player_id))
    # A restart or departure may land while each broadcast is in flight
    if not begin or not _still_counting_down(store, room):
        return

    await room.broadcast(CountdownStart())
    if _still_counting_down(store, room):
        schedule_countdown(store, room, countdown_seconds)


def _still_counting_down(store: RoomStore, room: Room) -> bool:
    return room.phase == GamePhase.COUNTDOWN and store.get(room.room_id) is room


def schedule_countdown(store: RoomStore, room: Room, delay: float) -> asyncio.Task:
    """Arm the deferred ``game_start`` for *room*, replacing any earlier one."""
    room.cancel_countdown()
    task = asyncio.create_task(_countdown_then_start(store, room.room_id, delay))
    room.countdown_task = task
    return task


async def _countdown_then_start(store: RoomStore, room_id: str, delay: float) -> None:
    try:
        await asyncio.sleep(delay)
    except asyncio.CancelledError:
        logger.debug(f"Countdown for room {room_id} cancelled")
        return

    # Re-read by id: the room may have been torn down while we slept
    room = store.get(room_id)
    if room is None or room.countdown_task is not asyncio.current_task():
        logger.debug(f"Stale countdown for room {room_id} ignored")
        return
    room.countdown_task = None
    await start_game(store, room_id)


async def start_game(store: RoomStore, room_id: str) -> bool:
    """Move a counting-down room into play. Returns *False* when the room is
    gone or no longer eligible, in which case nothing is sent."""
    room = store.get(room_id)
    if room is None:
        logger.debug(f"Countdown fired for vanished room {room_id}")
        return False
    if room.phase != GamePhase.COUNTDOWN or not room.all_ready():
        logger.debug(f"Countdown fired for room {room_id} in phase {room.phase.value}; abandoned")
        return False

    room.phase = GamePhase.IN_PROGRESS
    logger.info(f"Room {room_id} game started")
    await room.broadcast(GameStart())
    return True


# ---------------------------------------------------------------------------
# In-match events
# ---------------------------------------------------------------------------


async def apply_score(room: Room, connection_id: str, score: int, level: int) -> None:
    player = room.players.get(connection_id)
    if player is None:
        return
    if not room.game_started:
        logger.debug(f"Score from {player.player_id} in room {room.room_id} ignored; game not running")
        return

    player.score = score
    player.level = level

    game_over: Optional[GameOver] = None
    if player.level > room.config.target_level:
        room.phase = GamePhase.FINISHED
        game_over = GameOver(winner=player.player_id, scores=room.final_scores())
        logger.info(f"Room {room.room_id} won by {player.player_id} with scores {game_over.scores}")

    await room.relay(
        connection_id,
        OpponentScore(player_id=player.player_id, score=player.score, level=player.level),
    )
    if game_over is not None:
        await room.broadcast(game_over)


async def relay_wrong(room: Room, connection_id: str) -> None:
    player = room.players.get(connection_id)
    if player is None:
        return
    await room.relay(connection_id, OpponentWrong(player_id=player.player_id))


async def restart_game(room: Room) -> None:
    room.cancel_countdown()
    room.reset_players()
    room.phase = GamePhase.WAITING
    logger.info(f"Room {room.room_id} reset")
    await room.broadcast(GameReset())


# ---------------------------------------------------------------------------
# Departure
# ---------------------------------------------------------------------------


async def handle_departure(store: RoomStore, room: Room, connection_id: str) -> Optional[PlayerState]:
    """Remove *connection_id* from *room*; delete the room once it is empty.

    A room that loses a player mid-countdown or mid-match falls back to
    waiting, and the survivor must ready up again against the next opponent.
    """
    player = room.remove_player(connection_id)
    if player is None:
        return None
    logger.info(f"Player {player.player_id} left room {room.room_id}")

    if room.is_empty():
        store.remove(room.room_id)
        return player

    if room.phase != GamePhase.WAITING:
        room.cancel_countdown()
        room.phase = GamePhase.WAITING
        for survivor in room.players.values():
            survivor.ready = False

    await room.broadcast(PlayerLeft(player_id=player.player_id))
    return player


__all__ = [
    "mark_ready",
    "schedule_countdown",
    "start_game",
    "apply_score",
    "relay_wrong",
    "restart_game",
    "handle_departure",
]
