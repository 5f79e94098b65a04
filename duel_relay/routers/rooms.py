from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Request

from ..room import Room
from ..schemas import HealthResponse, RoomSummary
from ..session_router import SessionRouter

router = APIRouter(prefix="", tags=["rooms"])


def _session_router(request: Request) -> SessionRouter:
    return request.app.state.session_router


def _summarize(room: Room) -> RoomSummary:
    return RoomSummary(
        room_id=room.room_id,
        player_ids=room.player_ids(),
        player_count=room.member_count(),
        is_full=room.is_full(),
    )


@router.get("/rooms", response_model=List[RoomSummary])
async def list_rooms(request: Request):
    return [_summarize(room) for room in _session_router(request).rooms]


@router.get("/rooms/{room_id}", response_model=RoomSummary)
async def get_room(room_id: str, request: Request):
    room = _session_router(request).rooms.get(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return _summarize(room)


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    session_router = _session_router(request)
    return HealthResponse(rooms=len(session_router.rooms), clients=len(session_router.clients))
