from datetime import datetime, timezone
from typing import Annotated
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from iptvguide.config import settings
from iptvguide.schemas import (
    BatchNowNextResponse,
    ChannelListResponse,
    ChannelRowsResponse,
    ErrorDetail,
    GuideLoadRequest,
    GuideLoadResponse,
    NowNextRequest,
    NowNextResponse,
    PlaylistLoadRequest,
    PlaylistLoadResponse,
    ScheduleResponse,
    StandardErrorResponse,
)
from iptvguide.services import (
    ChannelLibrary,
    ChannelNotFoundError,
    GuideParseError,
    get_channel_library,
    get_now_next,
    get_now_next_batch,
    get_schedule,
    list_channels,
    list_rows,
)
from iptvguide.utils.timezone import DateFormatError, get_zone, parse_iso8601_to_utc


logger = logging.getLogger(__name__)

main_router = APIRouter()

Library = Annotated[ChannelLibrary, Depends(get_channel_library)]


@main_router.get("/")
async def root(library: Library) -> dict:
    """Root endpoint with service information"""
    return {
        "service": "IPTV Guide Service",
        "version": "0.1.0",
        "channels_loaded": len(library.channels),
        "guide_loaded": library.has_guide,
        "endpoints": {
            "playlist": "/playlist - Load an M3U playlist (POST)",
            "guide": "/guide - Load an XMLTV guide (POST)",
            "channels": "/channels - Search loaded channels",
            "rows": "/rows - Channels grouped into browse rows",
            "now-next": "/now-next - Now/next overlays for many channels (POST)",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health")
async def health_check(library: Library) -> dict:
    """Health check endpoint"""
    loaded = library.loaded_guide
    return {
        "status": "ok",
        "channels": len(library.channels),
        "guide_channels": len(loaded.guide.channel_id_to_name) if loaded else 0,
        "guide_programs": loaded.guide.program_count if loaded else 0,
    }


@main_router.post("/playlist", response_model=PlaylistLoadResponse)
async def load_playlist(request: PlaylistLoadRequest, library: Library) -> PlaylistLoadResponse:
    """
    Replace the loaded playlist

    Malformed entries are skipped; an empty playlist is accepted.
    """
    channels = library.load_playlist(request.content)
    groups = list(dict.fromkeys(channel.group for channel in channels))
    return PlaylistLoadResponse(
        timestamp=_now_iso(),
        channels_loaded=len(channels),
        groups=groups,
    )


@main_router.post(
    "/guide",
    response_model=GuideLoadResponse,
    responses={422: {"model": StandardErrorResponse}},
)
async def load_guide(request: GuideLoadRequest, library: Library):
    """
    Replace the loaded guide

    Malformed markup is rejected and the previously loaded guide stays active.
    """
    try:
        loaded = await library.load_guide_async(
            request.content,
            parse_timeout_seconds=settings.guide_parse_timeout_sec,
        )
    except GuideParseError as e:
        logger.error(f"Guide load rejected: {e}")
        error = StandardErrorResponse(
            timestamp=_now_iso(),
            error=ErrorDetail(
                code="GUIDE_PARSE_FAILED",
                message=str(e),
                context={"previous_guide_kept": library.has_guide},
            ),
        )
        return JSONResponse(status_code=422, content=error.model_dump())

    guide = loaded.guide
    return GuideLoadResponse(
        timestamp=_now_iso(),
        channels=len(guide.channel_id_to_name),
        programs=guide.program_count,
        channels_with_programs=len(guide.programs_by_channel_id),
        normalized_names=len(loaded.reconciliation.by_normalized_name),
    )


@main_router.get("/channels", response_model=ChannelListResponse)
async def search_channels(
    library: Library,
    query: Annotated[str, Query(description="Case-insensitive title search")] = "",
    group: Annotated[str | None, Query(description="Exact group title")] = None,
) -> ChannelListResponse:
    """Search loaded channels by title"""
    return list_channels(library, query, group)


@main_router.get("/rows", response_model=ChannelRowsResponse)
async def channel_rows(
    library: Library,
    query: Annotated[str, Query(description="Case-insensitive title search")] = "",
) -> ChannelRowsResponse:
    """Channels grouped by category, largest groups first"""
    return list_rows(library, query)


@main_router.get("/channels/{index}/now-next", response_model=NowNextResponse)
async def channel_now_next(
    index: int,
    library: Library,
    at: Annotated[str | None, Query(description="ISO8601 query instant")] = None,
    timezone_name: Annotated[str | None, Query(alias="timezone")] = None,
) -> NowNextResponse:
    """Current and next programme for one channel"""
    instant = _parse_instant(at)
    _check_timezone(timezone_name)
    try:
        return get_now_next(library, index, instant, timezone_name)
    except ChannelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@main_router.post("/now-next", response_model=BatchNowNextResponse)
async def now_next_batch(request: NowNextRequest, library: Library) -> BatchNowNextResponse:
    """
    Now/next overlays for many channels

    Args:
        request: Playlist indices (all channels when omitted), query instant and timezone

    Returns:
        One overlay per requested channel with timestamps in requested timezone
    """
    try:
        return get_now_next_batch(library, request)
    except ChannelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@main_router.get("/channels/{index}/schedule", response_model=ScheduleResponse)
async def channel_schedule(
    index: int,
    library: Library,
    day_offset: Annotated[int, Query(description="Days relative to today")] = 0,
    timezone_name: Annotated[str | None, Query(alias="timezone")] = None,
) -> ScheduleResponse:
    """Programme guide for one channel and one calendar day"""
    if abs(day_offset) > settings.max_schedule_day_offset:
        raise HTTPException(
            status_code=422,
            detail=f"day_offset must be within +/-{settings.max_schedule_day_offset} days",
        )
    _check_timezone(timezone_name)
    try:
        return get_schedule(library, index, day_offset, timezone_name)
    except ChannelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _parse_instant(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return parse_iso8601_to_utc(value)
    except DateFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _check_timezone(value: str | None) -> None:
    if value is None:
        return
    try:
        get_zone(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
