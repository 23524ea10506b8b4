"""FastAPI application wiring for heartforge."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from heartforge.api import routes
from heartforge.api.runtime import ApiState, build_state
from heartforge.config import get_settings

logger = logging.getLogger(__name__)


async def character_not_found(request: Request, exc: FileNotFoundError) -> JSONResponse:
    """Missing snapshots surface as 404s."""

    logger.warning("%s %s: no such character", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "character not found"})


async def rule_input_rejected(request: Request, exc: ValueError) -> JSONResponse:
    """Requests the rules cannot act on (level cap, unknown class or card)."""

    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Build the API around a character store supplied by ``state_factory``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.api_state = state_factory()
        try:
            yield
        finally:
            await app.state.api_state.shutdown()

    app = FastAPI(title="heartforge API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FileNotFoundError, character_not_found)
    app.add_exception_handler(ValueError, rule_input_rejected)
    app.include_router(routes.router)
    return app


app = create_app()
