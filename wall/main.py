"""Message Wall API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Storage adapter and payment verifier created once in the lifespan, stored on
      app.state; storage is disposed on shutdown; nothing serves before create_schema()
    - Global error handlers map WallError → structured JSON responses
    - Event-loop faults nobody handled terminate the process

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Request log records the path and presence of X-PAYMENT, never the header
      contents or the query string (pendingId is a live bearer token)
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from wall import __version__
from wall.api.error_handlers import register_error_handlers
from wall.api.routes import board, health, messages
from wall.config import get_settings
from wall.infrastructure.facilitator_client import FacilitatorVerifier
from wall.infrastructure.observability import install_fatal_handlers, setup_logging
from wall.infrastructure.storage import create_storage
from wall.services.pending_cleanup import run_purge_loop

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    install_fatal_handlers(asyncio.get_running_loop())

    storage = create_storage(
        settings.database_url,
        pending_ttl_seconds=settings.pending_ttl_seconds,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await storage.create_schema()
    verifier = FacilitatorVerifier(
        settings.facilitator_url, settings.facilitator_timeout_seconds,
    )
    app.state.storage = storage
    app.state.verifier = verifier

    purge_task = None
    if settings.pending_ttl_seconds > 0:
        purge_task = asyncio.create_task(run_purge_loop(
            storage, settings.pending_ttl_seconds,
            settings.pending_purge_interval_seconds,
        ))

    logger.info("Message wall started", extra={"backend": storage.backend_name})
    yield
    logger.info("Message wall shutting down")

    if purge_task is not None:
        purge_task.cancel()
        with suppress(asyncio.CancelledError):
            await purge_task
    await storage.close()


app = FastAPI(
    title="x402 Message Wall", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(
        f"{request.method} {request.url.path}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "has_payment": "x-payment" in request.headers,
        },
    )
    return await call_next(request)


app.include_router(health.router)
app.include_router(board.router)
app.include_router(messages.router)

register_error_handlers(app)
