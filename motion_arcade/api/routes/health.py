"""Liveness endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from motion_arcade.api.services.sessions import SessionRegistry
from motion_arcade.api.services.state import get_registry
from motion_arcade.core.config.games import GAMES

router = APIRouter()


@router.get("/health")
def health(registry: SessionRegistry = Depends(get_registry)) -> dict[str, Any]:
    """Report liveness plus the number of live sessions and playable games."""

    return {"status": "ok", "sessions": len(registry), "games": len(GAMES)}
