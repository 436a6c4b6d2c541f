"""Read-only REST endpoints for room inspection."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from snake_duel.server.models import BoardInfo, ErrorResponse, RoomSummary

router = APIRouter(tags=["rooms"])


def _get_registry(request: Request):
    return request.app.state.registry


@router.get("/health")
async def health(request: Request) -> dict:
    return {"status": "ok", "rooms": len(_get_registry(request))}


@router.get("/board")
async def board(request: Request) -> BoardInfo:
    """Board constants for client rendering."""
    settings = _get_registry(request).settings
    return BoardInfo(
        tile_count=settings.tile_count,
        grid_size=settings.grid_size,
        canvas_size=settings.canvas_size,
        tick_rate_hz=settings.tick_rate_hz,
    )


@router.get("/rooms")
async def list_rooms(request: Request) -> list[RoomSummary]:
    """List open rooms."""
    return _get_registry(request).list_rooms()


@router.get("/rooms/{room_id}", responses={404: {"model": ErrorResponse}})
async def get_room(room_id: str, request: Request) -> dict:
    """Room metadata plus the current simulation state."""
    room = _get_registry(request).get_room(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found.")
    result = room.summary().model_dump(mode="json")
    result["state"] = room.engine.get_state()
    return result
