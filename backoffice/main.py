"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Logging: configured before anything else logs
  2. Lifespan manager: handles startup/shutdown (DB table creation, cleanup)
  3. CORS middleware
  4. Exception handlers: maps domain errors to 400 {"error": ...}
  5. Router registration: /cuentas and /reportes

Running locally:
    uvicorn backoffice.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import backoffice.models  # noqa: F401  (registers tables on Base.metadata)
from backoffice.config import settings
from backoffice.database import engine, Base
from backoffice.exceptions import register_exception_handlers
from backoffice.logging_config import get_logger, setup_logging
from backoffice.routers import accounts, reports

setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, debug=settings.DEBUG)
logger = get_logger("backoffice")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
      Creates the tables if they don't exist. Convenient for local
      development; an existing ledger database is left untouched.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Bank back-office API: balances, movements, statements and monthly reports",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(accounts.router, prefix="/cuentas", tags=["Cuentas"])
app.include_router(reports.router, prefix="/reportes", tags=["Reportes"])


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for deployment probes."""
    return {"status": "ok", "version": settings.APP_VERSION}
