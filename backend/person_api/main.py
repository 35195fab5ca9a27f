"""Person API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PersonApiError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Startup aborts unless the unique email index is active

Design Decisions:
    - Lifespan over @app.on_event: cleaner cleanup, failure here stops uvicorn
    - Static files mounted AFTER API routes so /person/* and /health/* take precedence
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from person_api.api.error_handlers import register_error_handlers
from person_api.api.routes import health, person
from person_api.config import get_settings
from person_api.core.errors import SchemaSetupError
from person_api.infrastructure.database import ensure_person_schema, init_db
from person_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    try:
        await ensure_person_schema(manager.engine)
    except SchemaSetupError:
        await manager.close()
        raise
    logger.info("Person API started")
    yield
    logger.info("Person API shutting down")
    await manager.close()


app = FastAPI(
    title="Person API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(person.router)

if os.path.isdir(settings.static_dir):
    app.mount(
        "/", StaticFiles(directory=settings.static_dir, html=True), name="static",
    )
