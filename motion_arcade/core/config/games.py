from __future__ import annotations

from collections.abc import Callable
from typing import Any

from motion_arcade.core.classifiers.arm_circles import ArmCirclesClassifier
from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.classifiers.clap import ClapClassifier
from motion_arcade.core.classifiers.knees import KneeLiftClassifier
from motion_arcade.core.classifiers.lane import LaneClassifier
from motion_arcade.core.classifiers.punch import PunchClassifier
from motion_arcade.core.classifiers.squat import SquatClassifier
from motion_arcade.core.classifiers.twist import TwistClassifier
from motion_arcade.core.config.settings import (
    ArcadeSettings,
    arm_circles_config,
    clap_config,
    knee_lift_config,
    lane_config,
    punch_config,
    squat_config,
    twist_config,
)

# Each game drives exactly one classifier; the id is what the client sends.


GAMES: dict[str, Callable[[ArcadeSettings], GestureClassifier[Any]]] = {
    "climber": lambda s: SquatClassifier(squat_config(s)),
    "mosquito": lambda s: ClapClassifier(clap_config(s)),
    "ghost": lambda s: PunchClassifier(punch_config(s)),
    "highknees": lambda s: KneeLiftClassifier(knee_lift_config(s)),
    "laser": lambda s: TwistClassifier(twist_config(s)),
    "wizard": lambda s: ArmCirclesClassifier(arm_circles_config(s)),
    "train": lambda s: LaneClassifier(lane_config(s)),
}


GAME_LABELS: dict[str, str] = {
    "climber": "Squat Climber",
    "mosquito": "Mosquito Clap",
    "ghost": "Ghost Puncher",
    "highknees": "High Knees",
    "laser": "Laser Dodge",
    "wizard": "Arm Circles",
    "train": "Train Dodge",
}


GAME_GESTURES: dict[str, str] = {
    "climber": "squat",
    "mosquito": "clap",
    "ghost": "punch",
    "highknees": "knees",
    "laser": "twist",
    "wizard": "arm_circles",
    "train": "lane",
}


def list_games() -> list[dict[str, Any]]:
    return [
        {
            "id": game_id,
            "label": GAME_LABELS.get(game_id, game_id),
            "gesture": GAME_GESTURES.get(game_id),
        }
        for game_id in GAMES.keys()
    ]


def create_classifier(game_id: str, settings: ArcadeSettings | None = None) -> GestureClassifier[Any]:
    """Build a fresh classifier (a new session) for `game_id`."""

    if game_id not in GAMES:
        raise KeyError(game_id)
    return GAMES[game_id](settings or ArcadeSettings())
