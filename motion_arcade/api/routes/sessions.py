"""Game session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from motion_arcade.api.schemas.models import (
    FrameResultSchema,
    FrameSchema,
    SessionCreateSchema,
    SessionSchema,
)
from motion_arcade.api.services.sessions import GameSession, SessionRegistry
from motion_arcade.api.services.state import get_registry, get_settings

router = APIRouter(prefix="/sessions", tags=["sessions"])

SESSION_ACTIONS = ("start", "stop", "resume", "reset")


def _session_or_404(registry: SessionRegistry, session_id: str) -> GameSession:
    try:
        return registry.get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown session") from None


@router.post("", response_model=SessionSchema, status_code=201)
def create_session(
    body: SessionCreateSchema, registry: SessionRegistry = Depends(get_registry)
) -> SessionSchema:
    """Start a new session for a game; the classifier starts freshly reset."""

    try:
        session = registry.create(body.game, get_settings())
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown game") from None
    return SessionSchema(**session.snapshot())


@router.get("/{session_id}", response_model=SessionSchema)
def get_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionSchema:
    """Return the latest output record of a session."""

    return SessionSchema(**_session_or_404(registry, session_id).snapshot())


@router.delete("/{session_id}", status_code=204)
def delete_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> None:
    """End a session and forget its state."""

    _session_or_404(registry, session_id)
    registry.remove(session_id)


@router.post("/{session_id}/frames", response_model=FrameResultSchema)
def submit_frame(
    session_id: str, frame: FrameSchema, registry: SessionRegistry = Depends(get_registry)
) -> FrameResultSchema:
    """Classify one landmark frame."""

    session = _session_or_404(registry, session_id)
    output = session.feed(frame.model_dump())
    return FrameResultSchema(
        session_id=session.id,
        game=session.game,
        frames=session.classifier.frames,
        output=output,
    )


@router.post("/{session_id}/{action}", response_model=SessionSchema)
def control_session(
    session_id: str, action: str, registry: SessionRegistry = Depends(get_registry)
) -> SessionSchema:
    """Apply start, stop, resume or reset to a session."""

    if action not in SESSION_ACTIONS:
        raise HTTPException(status_code=404, detail="Unknown action")
    session = _session_or_404(registry, session_id)
    session.control(action)
    return SessionSchema(**session.snapshot())
