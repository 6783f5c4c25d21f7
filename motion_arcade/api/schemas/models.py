"""Pydantic models for the HTTP/WS API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from motion_arcade.core.types import KEYPOINTS


class LandmarkSchema(BaseModel):
    """One keypoint as sent by the client."""

    x: float
    y: float
    z: float = 0.0
    visibility: float = Field(default=0.0, ge=0.0, le=1.0)


class FrameSchema(BaseModel):
    """One landmark frame. Null/absent landmarks mean nobody was detected."""

    timestamp_ms: float | None = None
    landmarks: dict[str, LandmarkSchema] | None = None

    @field_validator("landmarks")
    @classmethod
    def _validate_names(cls, v: dict[str, LandmarkSchema] | None) -> dict[str, LandmarkSchema] | None:
        if v is None:
            return v
        unknown = sorted(set(v) - set(KEYPOINTS))
        if unknown:
            raise ValueError(f"unknown keypoints: {', '.join(unknown)}")
        return v


class GameSchema(BaseModel):
    id: str
    label: str
    gesture: str | None = None


class SessionCreateSchema(BaseModel):
    game: str


class SessionSchema(BaseModel):
    """Session status payload."""

    id: str
    game: str
    running: bool
    frames: int
    output: dict[str, Any]


class FrameResultSchema(BaseModel):
    """Classifier output for one submitted frame."""

    session_id: str
    game: str
    frames: int
    output: dict[str, Any]


class ConfigSchema(BaseModel):
    """Runtime configuration payload."""

    mirror_input: bool = True
    squat_calibration_frames: int = Field(default=30, ge=1)
    squat_ratio: float = Field(default=0.4, gt=0.0)
    stand_ratio: float = Field(default=0.2, gt=0.0, lt=1.0)
    punch_cooldown_frames: int = Field(default=12, ge=1)
    combo_window_ms: float = Field(default=2000.0, ge=0.0)
    hook_requires_side_zone: bool = False
    knee_trigger_offset: float = Field(default=0.15, gt=0.0)
    knee_reset_offset: float = Field(default=0.20, gt=0.0)
    twist_min_angle: float = Field(default=20.0, gt=0.0, le=90.0)
    twist_perfect_angle: float = Field(default=50.0, gt=0.0, le=90.0)
    rotation_hold_ms: float = Field(default=800.0, ge=0.0)
    clap_distance: float = Field(default=0.15, gt=0.0)
    unclap_distance: float = Field(default=0.30, gt=0.0)
    max_sessions: int = Field(default=16, ge=1)
    log_level: str = "INFO"
