"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from snake_duel.config import ServerSettings
from snake_duel.server.connections import ConnectionHub
from snake_duel.server.registry import RoomRegistry
from snake_duel.server.routes import router
from snake_duel.server.websocket import ws_router


def _install_state(app: FastAPI, settings: ServerSettings) -> None:
    app.state.settings = settings
    app.state.hub = ConnectionHub()
    app.state.registry = RoomRegistry(app.state.hub, settings)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    await app.state.registry.close_all()
    await app.state.hub.close_all()


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Snake Duel Server", version="0.1.0", lifespan=_lifespan,
    )
    _install_state(app, settings or ServerSettings.from_env())
    app.include_router(router)
    app.include_router(ws_router)
    return app
