"""Arcade configuration.

Settings are loaded from YAML defaults and overridden by environment variables
prefixed with `MA_`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from motion_arcade.core.classifiers.arm_circles import ArmCirclesConfig
from motion_arcade.core.classifiers.clap import ClapConfig
from motion_arcade.core.classifiers.knees import KneeLiftConfig
from motion_arcade.core.classifiers.lane import LaneConfig
from motion_arcade.core.classifiers.punch import PunchConfig
from motion_arcade.core.classifiers.squat import SquatConfig
from motion_arcade.core.classifiers.twist import TwistConfig

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class _ArcadeFields(BaseSettings):
    """Tunables with per-field validation only."""

    # Flip incoming landmarks to selfie view before classification.
    mirror_input: bool = True

    squat_calibration_frames: int = 30
    squat_ratio: float = 0.4
    stand_ratio: float = 0.2

    punch_cooldown_frames: int = 12
    combo_window_ms: float = 2000.0
    hook_requires_side_zone: bool = False

    knee_trigger_offset: float = 0.15
    knee_reset_offset: float = 0.20

    twist_min_angle: float = 20.0
    twist_perfect_angle: float = 50.0

    rotation_hold_ms: float = 800.0

    clap_distance: float = 0.15
    unclap_distance: float = 0.30

    max_sessions: int = Field(16, description="Live sessions kept by the service")
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="MA_", validate_assignment=True)

    @field_validator("squat_calibration_frames", "punch_cooldown_frames", "max_sessions")
    @classmethod
    def _validate_positive_int(cls, v: int) -> int:
        if int(v) < 1:
            raise ValueError("value must be >= 1")
        return int(v)

    @field_validator("squat_ratio", "knee_trigger_offset", "knee_reset_offset", "clap_distance")
    @classmethod
    def _validate_positive(cls, v: float) -> float:
        if float(v) <= 0.0:
            raise ValueError("value must be > 0")
        return float(v)

    @field_validator("stand_ratio")
    @classmethod
    def _validate_stand_ratio(cls, v: float) -> float:
        if not 0.0 < float(v) < 1.0:
            raise ValueError("stand_ratio must be in (0, 1)")
        return float(v)

    @field_validator("combo_window_ms", "rotation_hold_ms")
    @classmethod
    def _validate_window(cls, v: float) -> float:
        if float(v) < 0.0:
            raise ValueError("time windows must be >= 0")
        return float(v)

    @field_validator("twist_min_angle", "twist_perfect_angle")
    @classmethod
    def _validate_angle(cls, v: float) -> float:
        if not 0.0 < float(v) <= 90.0:
            raise ValueError("twist angles must be in (0, 90]")
        return float(v)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        v2 = str(v).strip().upper()
        if v2 not in LOG_LEVELS:
            raise ValueError("log_level must be DEBUG|INFO|WARNING|ERROR|CRITICAL")
        return v2


class ArcadeSettings(_ArcadeFields):
    """Runtime configuration loaded from YAML defaults and `MA_` env overrides.

    Paired thresholds are checked here, on the merged values.
    """

    @model_validator(mode="after")
    def _validate_pairs(self) -> ArcadeSettings:
        if self.knee_trigger_offset >= self.knee_reset_offset:
            raise ValueError("knee_trigger_offset must be smaller than knee_reset_offset")
        if self.twist_min_angle >= self.twist_perfect_angle:
            raise ValueError("twist_min_angle must be smaller than twist_perfect_angle")
        if self.clap_distance >= self.unclap_distance:
            raise ValueError("clap_distance must be smaller than unclap_distance")
        return self


def settings_to_dict(settings: ArcadeSettings) -> dict[str, Any]:
    """Convert settings to a plain dict."""

    return cast(dict[str, Any], settings.model_dump())


def _config_path() -> Path:
    """Return the YAML configuration path (defaults to config/arcade.config.yml)."""

    return Path(os.getenv("MA_CONFIG", "config/arcade.config.yml"))


def load_settings() -> ArcadeSettings:
    """Load settings from YAML and environment variables.

    YAML provides defaults; environment variables override.
    """

    data: dict[str, Any] = {}
    path = _config_path()
    if path.exists():
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    # Pair checks run on the merged values only.
    env_settings = _ArcadeFields()
    env_overrides: dict[str, Any] = {
        name: getattr(env_settings, name) for name in env_settings.model_fields_set
    }

    merged = {**data, **env_overrides}
    return ArcadeSettings(**merged)


def squat_config(settings: ArcadeSettings) -> SquatConfig:
    return SquatConfig(
        calibration_frames=settings.squat_calibration_frames,
        squat_ratio=settings.squat_ratio,
        stand_ratio=settings.stand_ratio,
    )


def punch_config(settings: ArcadeSettings) -> PunchConfig:
    return PunchConfig(
        cooldown_frames=settings.punch_cooldown_frames,
        combo_window_ms=settings.combo_window_ms,
        hook_requires_side_zone=settings.hook_requires_side_zone,
    )


def knee_lift_config(settings: ArcadeSettings) -> KneeLiftConfig:
    return KneeLiftConfig(
        trigger_offset=settings.knee_trigger_offset,
        reset_offset=settings.knee_reset_offset,
    )


def twist_config(settings: ArcadeSettings) -> TwistConfig:
    return TwistConfig(
        min_twist=settings.twist_min_angle,
        perfect_twist=settings.twist_perfect_angle,
    )


def arm_circles_config(settings: ArcadeSettings) -> ArmCirclesConfig:
    return ArmCirclesConfig(hold_ms=settings.rotation_hold_ms)


def clap_config(settings: ArcadeSettings) -> ClapConfig:
    return ClapConfig(
        clap_distance=settings.clap_distance,
        unclap_distance=settings.unclap_distance,
    )


def lane_config(settings: ArcadeSettings) -> LaneConfig:
    return LaneConfig()
