"""Message query endpoints.

All routes live under ``/api/messages``. List endpoints share the page, size
and sort parameters of `get_page_request`. Numeric path and query values are
bounded so that they always fit the database's signed 64-bit columns; values
outside the range are rejected with a 422 before any query runs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request

from discord_logger.api.schemas import (
    ChannelStatsResponse,
    HealthResponse,
    MessageResponse,
    PageResponse,
)
from discord_logger.db.pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PageRequest,
    parse_sort,
)
from discord_logger.services import MessageLoggerService
from discord_logger.utils.time import ensure_utc, utcnow

# Largest value a BIGINT column holds.
MAX_SNOWFLAKE = 2**63 - 1
# Keeps page * size (the query offset) within BIGINT.
MAX_PAGE = MAX_SNOWFLAKE // MAX_PAGE_SIZE

router = APIRouter(prefix="/api/messages", tags=["messages"])


def get_service(request: Request) -> MessageLoggerService:
    return request.app.state.service


def get_page_request(
    page: int = Query(0, ge=0, le=MAX_PAGE, description="Zero-based page index"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    sort: str = Query("timestamp,desc", description="Sort as field,direction"),
) -> PageRequest:
    # InvalidSortError is turned into a 400 by the app's exception handler.
    return PageRequest(page=page, size=size, sort=parse_sort(sort))


def snowflake_path(description: str) -> Any:
    return Path(..., ge=0, le=MAX_SNOWFLAKE, description=description)


# Fixed paths are declared before /{message_id} so they are matched first.


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="UP", timestamp=utcnow())


@router.get("/channel/{channel_id}", response_model=PageResponse[MessageResponse])
async def get_messages_by_channel(
    channel_id: int = snowflake_path("Discord channel id"),
    page_request: PageRequest = Depends(get_page_request),
    service: MessageLoggerService = Depends(get_service),
) -> PageResponse:
    page = await service.get_messages_by_channel(channel_id, page_request)
    return PageResponse[MessageResponse].from_page(page, MessageResponse)


@router.get("/author/{author_id}", response_model=PageResponse[MessageResponse])
async def get_messages_by_author(
    author_id: int = snowflake_path("Discord user id"),
    page_request: PageRequest = Depends(get_page_request),
    service: MessageLoggerService = Depends(get_service),
) -> PageResponse:
    page = await service.get_messages_by_author(author_id, page_request)
    return PageResponse[MessageResponse].from_page(page, MessageResponse)


@router.get("/search", response_model=PageResponse[MessageResponse])
async def search_messages(
    query: str = Query(..., description="Case-insensitive substring to look for"),
    page_request: PageRequest = Depends(get_page_request),
    service: MessageLoggerService = Depends(get_service),
) -> PageResponse:
    page = await service.search_messages(query, page_request)
    return PageResponse[MessageResponse].from_page(page, MessageResponse)


@router.get("/recent", response_model=PageResponse[MessageResponse])
async def get_recent_messages(
    since: datetime = Query(..., description="ISO-8601 lower bound, UTC if naive"),
    page_request: PageRequest = Depends(get_page_request),
    service: MessageLoggerService = Depends(get_service),
) -> PageResponse:
    page = await service.get_recent_messages(ensure_utc(since), page_request)
    return PageResponse[MessageResponse].from_page(page, MessageResponse)


@router.get("/stats/channel/{channel_id}", response_model=ChannelStatsResponse)
async def get_channel_stats(
    channel_id: int = snowflake_path("Discord channel id"),
    service: MessageLoggerService = Depends(get_service),
) -> ChannelStatsResponse:
    stats = await service.get_message_stats(channel_id)
    return ChannelStatsResponse(
        channel_id=stats.channel_id, total_messages=stats.total_messages
    )


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: int = snowflake_path("Discord message id"),
    service: MessageLoggerService = Depends(get_service),
) -> MessageResponse:
    message = await service.get_message(message_id)
    if message is None:
        raise HTTPException(status_code=404, detail="Message not found")
    return MessageResponse.model_validate(message)
