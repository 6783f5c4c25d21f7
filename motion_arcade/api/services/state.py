"""In-process state for settings and live sessions.

FastAPI routes use this module to access (and hot-reload) the settings and the
singleton `SessionRegistry`.
"""

from __future__ import annotations

from threading import RLock

from motion_arcade.api.services.sessions import SessionRegistry
from motion_arcade.core.config.settings import ArcadeSettings, load_settings, settings_to_dict

_settings: ArcadeSettings | None = None
_registry: SessionRegistry | None = None
_lock = RLock()


def get_settings() -> ArcadeSettings:
    """Return cached settings, loading them on first use."""

    global _settings
    with _lock:
        if _settings is None:
            _settings = load_settings()
    return _settings


def reload_settings(data: dict | None = None) -> ArcadeSettings:
    """Reload settings; sessions created afterwards use the new tunables.

    Args:
        data: Optional patch dict merged into the loaded settings.
    """

    global _settings
    with _lock:
        base = load_settings()
        if data:
            _settings = ArcadeSettings(**{**settings_to_dict(base), **data})
        else:
            _settings = base
        if _registry is not None:
            _registry.max_sessions = _settings.max_sessions
    return _settings


def get_registry() -> SessionRegistry:
    """Return the singleton session registry, creating it if needed."""

    global _registry
    with _lock:
        if _registry is None:
            _registry = SessionRegistry(max_sessions=get_settings().max_sessions)
    return _registry


def clear_sessions() -> None:
    """Stop and discard every live session (if any)."""

    with _lock:
        if _registry is not None:
            _registry.clear()
