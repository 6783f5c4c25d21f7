from __future__ import annotations

import json
import logging
import time

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from motion_arcade.api.schemas.models import FrameSchema
from motion_arcade.api.services.state import get_registry

router = APIRouter()

logger = logging.getLogger(__name__)

# Application-defined close code for an unknown session id.
CLOSE_UNKNOWN_SESSION = 4404


@router.websocket("/sessions/{session_id}/stream")
async def stream_session(ws: WebSocket, session_id: str):
    """Frame-in, output-out loop for one session.

    Every JSON message is either `{"type": "ping", "t": ...}` or a frame
    (`{"timestamp_ms": ..., "landmarks": {...}}`); each frame is answered with
    the classifier output for that frame.
    """

    await ws.accept()
    try:
        session = get_registry().get(session_id)
    except KeyError:
        await ws.close(code=CLOSE_UNKNOWN_SESSION)
        return

    try:
        while True:
            msg = await ws.receive_json()
            if not isinstance(msg, dict):
                await ws.send_json({"type": "error", "detail": "expected a JSON object"})
                continue
            if msg.get("type") == "ping":
                await ws.send_json({"type": "pong", "t": msg.get("t"), "server_time": time.time()})
                continue

            try:
                frame = FrameSchema(**{k: v for k, v in msg.items() if k != "type"})
            except ValidationError as exc:
                await ws.send_json({"type": "error", "detail": json.loads(exc.json(include_url=False))})
                continue

            output = session.feed(frame.model_dump())
            await ws.send_json(
                {
                    "type": "output",
                    "session_id": session.id,
                    "frames": session.classifier.frames,
                    "output": output,
                }
            )
    except WebSocketDisconnect:
        return
    except Exception:
        logger.exception("Session websocket crashed")
        try:
            await ws.close(code=1011)
        except Exception:
            pass
        return
