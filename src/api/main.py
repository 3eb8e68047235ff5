"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
wires the process-wide collaborators and manages lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.audit.console import LoggingAuditSink
from src.adapters.notifications.console import ConsoleNotificationSender
from src.adapters.repository import (
    InMemoryAccountRepository,
    PostgresAccountRepository,
    run_migrations,
)
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings
from src.domain.audit import AuditRecorder
from src.domain.sessions import VerificationSessionStore

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "BrokerX onboarding API v1 - Register, verify and log in",
    },
]


def wire_state(state: Any, settings: Settings, pool: ConnectionPool | None = None) -> None:
    """
    Attach the process-wide collaborators to app.state.

    The session store is created once here and shared by every request.
    """
    if pool is not None:
        state.repository = PostgresAccountRepository(pool)
    else:
        state.repository = InMemoryAccountRepository()

    ttl = (
        timedelta(seconds=settings.session_ttl_seconds)
        if settings.session_ttl_seconds is not None
        else None
    )
    state.pool = pool
    state.sessions = VerificationSessionStore(ttl=ttl)
    state.notifier = ConsoleNotificationSender(settings.verification_link_base_url)
    state.auditor = AuditRecorder(LoggingAuditSink())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and runs migrations (postgres backend)
    - Wires repository, session store, notifier and audit recorder
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    pool = None
    if settings.repository_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
    else:
        logger.info("Using in-memory account repository")

    wire_state(app.state, settings, pool)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="brokerx",
    description="BrokerX onboarding API - Account registration with two-factor "
    "identity verification and audited activation",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if the application (and database, when configured)
    is healthy. Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
