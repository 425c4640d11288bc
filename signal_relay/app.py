from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, configure_logging, load_settings
from .registry import RoomRegistry
from .routers import rooms as rooms_router
from .routers import websockets as ws_router

# -----------------------------
# FastAPI app factory
# -----------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the relay application with its own, empty room registry."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Signal Relay")
    app.state.settings = settings
    app.state.registry = RoomRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(rooms_router.router)
    app.include_router(ws_router.router)
    # The relay socket is also served on the configured path (``/`` by default).
    if settings.ws_path != "/ws":
        app.add_api_websocket_route(settings.ws_path, ws_router.relay_ws_endpoint)

    return app


__all__ = ["create_app"]
