from __future__ import annotations

from typing import List

from fastapi import APIRouter, Request

from ..registry import RoomRegistry
from ..schemas import HealthResponse, RoomSummary

router = APIRouter(prefix="", tags=["rooms"])


def _registry(request: Request) -> RoomRegistry:
    return request.app.state.registry


@router.get("/rooms", response_model=List[RoomSummary])
async def list_rooms(request: Request):
    return _registry(request).summaries()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    registry = _registry(request)
    return HealthResponse(rooms=len(registry.rooms), sessions=len(registry.sessions))
