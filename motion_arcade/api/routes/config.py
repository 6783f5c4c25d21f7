"""Configuration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from motion_arcade.api.schemas.models import ConfigSchema
from motion_arcade.api.services.state import get_settings, reload_settings
from motion_arcade.core.config.settings import settings_to_dict

router = APIRouter()


@router.get("/config", response_model=ConfigSchema)
def get_config() -> ConfigSchema:
    """Return the current effective configuration."""

    settings = get_settings()
    return ConfigSchema(**settings_to_dict(settings))


@router.post("/config", response_model=ConfigSchema)
def update_config(cfg: ConfigSchema) -> ConfigSchema:
    """Update in-memory settings.

    Running sessions keep the tunables they were created with; new sessions
    pick up the update. Persist configuration via environment variables or the
    YAML config file.
    """

    try:
        settings = reload_settings(cfg.model_dump())
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    return ConfigSchema(**settings_to_dict(settings))
