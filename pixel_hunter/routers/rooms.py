from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Request

from ..schemas import RoomDetail, RoomSummary
from ..store import RoomStore

router = APIRouter(prefix="", tags=["rooms"])


def _store(request: Request) -> RoomStore:
    return request.app.state.store


@router.get("/health")
async def health():
    return {"status": "healthy"}


@router.get("/rooms", response_model=List[RoomSummary])
async def list_rooms(request: Request):
    return [room.summary() for room in _store(request)]


@router.get("/rooms/{room_id}", response_model=RoomDetail)
async def get_room(room_id: str, request: Request):
    room = _store(request).get(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return room.detail()
