"""
ledgerhook.api.main — FastAPI application entry point
=====================================================

Run with::

    uvicorn ledgerhook.api.main:app --port 3000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from ledgerhook.api.routes.diagnostics import router as diagnostics_router  # noqa: E402
from ledgerhook.api.routes.notify import router as notify_router  # noqa: E402
from ledgerhook.api.routes.revenue import router as revenue_router  # noqa: E402
from ledgerhook.config import load_config  # noqa: E402
from ledgerhook.runtime import Runtime  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: build the runtime unless one was injected."""
    owned = getattr(app.state, "runtime", None) is None
    if owned:
        app.state.runtime = Runtime.build(load_config())
    runtime: Runtime = app.state.runtime
    logger.info(
        "%s started, tracking %d wallets",
        runtime.cfg.service_name, len(runtime.cfg.accounts),
    )
    yield
    logger.info("%s shutting down", runtime.cfg.service_name)
    if owned:
        await runtime.aclose()
        app.state.runtime = None


def create_app(runtime: Runtime | None = None) -> FastAPI:
    """Build the API.  Tests pass a prebuilt *runtime*."""
    app = FastAPI(
        title="Ledgerhook Discord Relay",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(diagnostics_router)
    app.include_router(notify_router)
    app.include_router(revenue_router)
    return app


app = create_app()
