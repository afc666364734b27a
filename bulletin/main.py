"""
Requirements Board -- Application entry point.

Run with:
    python -m bulletin
or
    uvicorn bulletin.main:create_app --factory

Then open http://localhost:3000 for the board, or /docs for the HTTP API.

This file:
  1. Loads settings and the persisted registry
  2. Wires the registry, connection manager and protocol handler together
  3. Mounts the WebSocket and read-only HTTP routes
  4. Defines the health checks
  5. Serves the browser client from ./public
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from bulletin import __version__
from bulletin.config import Settings
from bulletin.connections import ConnectionManager
from bulletin.models.schemas import HealthStatus
from bulletin.protocol import BoardProtocol
from bulletin.registry import RequirementRegistry
from bulletin.routes import board, students
from bulletin.store import load_registry, save_registry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Resolve the client directory relative to this file so it works both from
# a checkout and from an editable install.
PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    # ---------------------------------------------------------------------------
    # Shared state
    #
    # Exactly one registry per process. Every socket handler reaches it
    # through app.state.board; nothing else holds a copy.
    # ---------------------------------------------------------------------------

    registry = RequirementRegistry(load_registry(settings.data_file))
    protocol = BoardProtocol(registry, ConnectionManager(), settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Board ready: %d students, data file %s", len(registry), settings.data_file,
        )
        yield
        # Final write on the way out.
        save_registry(settings.data_file, registry.snapshot())
        logger.info("Board saved to %s", settings.data_file)

    app = FastAPI(
        title="Requirements Board",
        version=__version__,
        description=(
            "Live board of outstanding requirements per student (LRN).\n\n"
            "Viewers and the admin page talk to `/ws`; every edit is saved to "
            "disk and pushed to all open pages."
        ),
        lifespan=lifespan,
    )
    app.state.board = protocol
    app.state.settings = settings

    app.include_router(board.router)
    app.include_router(students.router)

    # ---------------------------------------------------------------------------
    # Health checks
    # ---------------------------------------------------------------------------

    @app.get("/health", response_class=PlainTextResponse, include_in_schema=False)
    async def liveness() -> str:
        return "OK"

    @app.get(
        "/v1/health",
        response_model=HealthStatus,
        summary="Health check",
        description="Board size and number of open sockets. Use this for uptime monitoring.",
        tags=["System"],
    )
    async def health() -> HealthStatus:
        return HealthStatus(
            status="healthy",
            version=__version__,
            students_stored=len(protocol.registry),
            connections_open=len(protocol.connections),
            admin_auth_required=settings.require_admin_auth,
        )

    # Mounted last: "/" would otherwise shadow every route above.
    if PUBLIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")

    return app

