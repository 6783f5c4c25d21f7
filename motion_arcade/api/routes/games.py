"""Game catalog endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from motion_arcade.api.schemas.models import GameSchema
from motion_arcade.core.config.games import list_games

router = APIRouter()


@router.get("/games", response_model=list[GameSchema])
def get_games() -> list[GameSchema]:
    """Return the playable games and the gesture each one is driven by."""

    return [GameSchema(**game) for game in list_games()]
