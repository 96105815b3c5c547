"""Huddle API — FastAPI application entry point and composition root.

Invariants:
    - Routes registered explicitly, one router per concept (no auto-discovery)
    - Global error handlers map HuddleError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; this module only wires
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from huddle.api.error_handlers import register_error_handlers
from huddle.api.routes import (
    comments, communities, friends, goals, health, maintenance, posts, users,
)
from huddle.config import get_settings
from huddle.infrastructure.database import init_db
from huddle.infrastructure.observability import setup_logging

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
    logger.info("Huddle API started")
    yield
    logger.info("Huddle API shutting down")
    await manager.dispose()


app = FastAPI(
    title="Huddle API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route table: one router per concept
app.include_router(health.router)
app.include_router(users.router)
app.include_router(friends.router)
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(communities.router)
app.include_router(goals.router)
app.include_router(maintenance.router)

register_error_handlers(app)
