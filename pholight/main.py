"""
PhoLight - FastAPI Application
================================
Creates and configures the FastAPI web application that relays host
commands to audience devices.

Responsibilities:
    - Create the FastAPI app instance with CORS and metadata
    - Build the relay state (password authority, registry, router)
    - Register the WebSocket endpoint and the small /api router
    - Serve the static client pages (index.html, host.html) if present

Architecture:
    Everything that touches shared state goes through one RelayManager
    stored on app.state.relay. The WebSocket is available at web.ws_path
    ("/" by default, which is where the browser pages connect).
"""

import logging
import os
from datetime import timedelta

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from pholight import __version__
from pholight.config import ConfigManager
from pholight.password import PasswordAuthority
from pholight.routes import create_router
from pholight.websocket import RelayManager


logger = logging.getLogger("pholight.main")


def create_app(
    project_dir: str | None = None,
    config: dict | None = None,
    authority: PasswordAuthority | None = None,
) -> FastAPI:
    """
    Application factory: create and configure the FastAPI instance.

    Args:
        project_dir: Root directory of the PhoLight project.
                     If None, auto-detected from this file's location.
        config:      Already-loaded configuration. If None, it is loaded
                     through ConfigManager.
        authority:   Password authority to use. If None, a new one is
                     created with the configured lifetime.

    Returns:
        Configured FastAPI application ready to run with uvicorn.
    """
    # -- Resolve configuration -------------------------------------------------
    if project_dir is None:
        project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    config_manager = ConfigManager(project_dir)
    if config is None:
        config = config_manager.load()

    web = config["web"]
    auth = config["auth"]

    # -- Initialize relay state ------------------------------------------------
    if authority is None:
        authority = PasswordAuthority(duration=timedelta(hours=auth["password_hours"]))
    relay = RelayManager(authority=authority, exclusive_host=bool(auth["exclusive_host"]))

    # -- Create FastAPI app ----------------------------------------------------
    app = FastAPI(
        title="PhoLight",
        description="Synchronized party lighting relay",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.relay = relay

    # -- API routes ------------------------------------------------------------
    app.include_router(create_router(relay))

    # -- WebSocket endpoint ----------------------------------------------------
    @app.websocket(web["ws_path"])
    async def websocket_endpoint(websocket: WebSocket):
        """
        Relay endpoint. Every browser page, host or audience, connects here
        and starts out as audience.
        """
        await relay.serve(websocket)

    # -- Static client pages ---------------------------------------------------
    # Mounted last so /api and the WebSocket route take precedence.
    client_dir = config_manager.client_dir(config)
    if os.path.isdir(client_dir):
        app.mount("/", StaticFiles(directory=client_dir, html=True), name="client")
    else:
        logger.info(f"No client directory at {client_dir}, static pages disabled")

    return app
