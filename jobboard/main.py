"""
Reference job-board auth service — application entry point.

This is the **only** file that assembles the app.  Endpoint logic lives
in the `api/` package; token and password handling in `core/`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobboard.api.api import api_router
from jobboard.core.config import settings
from jobboard.core.exceptions import register_exception_handlers
from jobboard.db.registry import AccountRegistry

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app(accounts: AccountRegistry | None = None) -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Reference auth service for the job-board request client",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        lifespan=lifespan,
    )
    application.state.accounts = accounts if accounts is not None else AccountRegistry()

    # CORS — credentials are required for the refresh cookie
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)
    return application


app = create_app()
