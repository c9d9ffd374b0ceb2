"""FastAPI application factory for the message query API.

The app holds no state of its own: it is built around an existing
MessageLoggerService, stored on ``app.state`` for the route dependencies.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from discord_logger.api.routes import router
from discord_logger.config.settings import ApiConfig
from discord_logger.db.pagination import InvalidSortError
from discord_logger.services import MessageLoggerService

logger = logging.getLogger(__name__)


def create_app(
    service: MessageLoggerService,
    settings: ApiConfig | None = None,
) -> FastAPI:
    """Build the API around an existing message logger service.

    Args:
        service: Service answering every query.
        settings: API settings; only ``cors_origins`` is read here.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or ApiConfig()

    app = FastAPI(
        title="Discord Message Logger",
        description="Query API for logged Discord messages",
        version="0.1.0",
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidSortError)
    async def invalid_sort_handler(request: Request, exc: InvalidSortError) -> JSONResponse:
        logger.info(f"Rejected sort on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    app.include_router(router)
    return app
