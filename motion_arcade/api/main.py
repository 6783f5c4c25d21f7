"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from motion_arcade.api.routes import config, games, health, sessions, stream


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler.

    Configures logging on startup and drops every live session on shutdown.
    """

    from motion_arcade.api.services.state import clear_sessions, get_settings

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    yield
    clear_sessions()


app = FastAPI(title="Motion Arcade API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(games.router)
app.include_router(config.router)
app.include_router(sessions.router)
app.include_router(stream.router)


if __name__ == "__main__":
    uvicorn.run("motion_arcade.api.main:app", host="0.0.0.0", port=8000, reload=True)
