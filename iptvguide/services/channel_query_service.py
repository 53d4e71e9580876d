"""
Channel Query Service

Business logic behind the read endpoints: channel listings, browse rows,
now/next overlays and day schedules, shaped into response models.
"""
from datetime import datetime, timezone
import logging

from iptvguide.config import settings
from iptvguide.schemas import (
    BatchNowNextResponse,
    ChannelListResponse,
    ChannelResponse,
    ChannelRowResponse,
    ChannelRowsResponse,
    NowNextRequest,
    NowNextResponse,
    ProgramResponse,
    ScheduleResponse,
)
from iptvguide.services.browse_service import build_channel_rows, filter_channels
from iptvguide.services.guide_types import ChannelRecord, ProgramEntry
from iptvguide.services.library_service import ChannelLibrary
from iptvguide.services.now_next_service import find_now_next, programs_for_day
from iptvguide.services.reconciliation_service import match_channel_id
from iptvguide.utils.timezone import calculate_day_window, convert_to_timezone, parse_iso8601_to_utc

logger = logging.getLogger(__name__)


class ChannelNotFoundError(LookupError):
    """Raised when a playlist index does not exist"""

    def __init__(self, index: int):
        super().__init__(f"No channel at playlist index {index}")
        self.index = index


def list_channels(library: ChannelLibrary, query: str = "", group: str | None = None) -> ChannelListResponse:
    """Search the loaded playlist by title and optional group"""
    matches = filter_channels(library.channels, query, group)
    logger.debug(f"Channel search query={query!r} group={group!r}: {len(matches)} matches")
    return ChannelListResponse(
        total=len(matches),
        channels=[channel_to_response(index, channel) for index, channel in matches],
    )


def list_rows(library: ChannelLibrary, query: str = "") -> ChannelRowsResponse:
    """Group the (optionally filtered) playlist into browse rows"""
    rows = build_channel_rows(filter_channels(library.channels, query))
    return ChannelRowsResponse(
        rows=[
            ChannelRowResponse(
                title=row.title,
                channels=[channel_to_response(index, channel) for index, channel in row.channels],
            )
            for row in rows
        ]
    )


def get_now_next(
    library: ChannelLibrary,
    index: int,
    at: datetime | None = None,
    timezone_str: str | None = None
) -> NowNextResponse:
    """
    Resolve now/next for one playlist channel

    Raises:
        ChannelNotFoundError: If the index is out of range
    """
    channel = _require_channel(library, index)
    now = at or datetime.now(timezone.utc)
    return _resolve_for_channel(library, index, channel, now, timezone_str or settings.default_timezone)


def get_now_next_batch(library: ChannelLibrary, request: NowNextRequest) -> BatchNowNextResponse:
    """
    Resolve now/next overlays for many channels against the same guide snapshot

    Args:
        library: Loaded playlist and guide
        request: Channel indices (all when omitted), query instant and timezone

    Returns:
        One result per requested channel, in request order

    Raises:
        ChannelNotFoundError: If any requested index is out of range
    """
    tz_name = request.timezone or settings.default_timezone
    now = parse_iso8601_to_utc(request.at) if request.at else datetime.now(timezone.utc)
    indices = request.channel_indices
    if indices is None:
        indices = list(range(len(library.channels)))

    logger.info(f"Received now/next request: {len(indices)} channels, at={now.isoformat()}, timezone={tz_name}")

    results = [
        _resolve_for_channel(library, index, _require_channel(library, index), now, tz_name)
        for index in indices
    ]
    matched = sum(1 for result in results if result.guide_channel_id is not None)

    logger.info(f"Now/next response: {matched}/{len(results)} channels matched to guide data")

    return BatchNowNextResponse(
        timestamp=convert_to_timezone(now, tz_name),
        timezone=tz_name,
        guide_loaded=library.has_guide,
        channels_requested=len(indices),
        channels_matched=matched,
        results=results,
    )


def get_schedule(
    library: ChannelLibrary,
    index: int,
    day_offset: int = 0,
    timezone_str: str | None = None,
    now: datetime | None = None
) -> ScheduleResponse:
    """
    Get a channel's programmes for one calendar day

    Args:
        library: Loaded playlist and guide
        index: Playlist index
        day_offset: Days relative to today in the requested timezone
        timezone_str: Timezone delimiting the day and used for response timestamps
        now: Reference instant for "today"

    Raises:
        ChannelNotFoundError: If the index is out of range
    """
    channel = _require_channel(library, index)
    tz_name = timezone_str or settings.default_timezone
    day_start, day_end = calculate_day_window(day_offset, tz_name, now)

    guide_channel_id = None
    programs: list[ProgramEntry] = []
    loaded = library.loaded_guide
    if loaded is not None:
        guide_channel_id = match_channel_id(channel, loaded.guide, loaded.reconciliation)
        if guide_channel_id is not None:
            programs = programs_for_day(
                loaded.guide.programs_by_channel_id[guide_channel_id], day_start, day_end
            )

    logger.info(f"Schedule for channel {index} ({channel.title}), day offset {day_offset}: {len(programs)} programs")

    return ScheduleResponse(
        index=index,
        title=channel.title,
        guide_channel_id=guide_channel_id,
        timezone=tz_name,
        day_start=convert_to_timezone(day_start, tz_name),
        day_end=convert_to_timezone(day_end, tz_name),
        programs=[program_to_response(program, tz_name) for program in programs],
    )


def channel_to_response(index: int, channel: ChannelRecord) -> ChannelResponse:
    return ChannelResponse(
        index=index,
        title=channel.title,
        group=channel.group,
        logo_url=channel.logo_url,
        guide_id=channel.guide_id,
        channel_number=channel.channel_number,
        stream_url=channel.stream_url,
        attributes=dict(channel.raw_attributes),
    )


def program_to_response(program: ProgramEntry, timezone_str: str) -> ProgramResponse:
    return ProgramResponse(
        start_time=convert_to_timezone(program.start, timezone_str),
        stop_time=convert_to_timezone(program.stop, timezone_str),
        title=program.title,
        description=program.description,
        category=program.category,
    )


def _resolve_for_channel(
    library: ChannelLibrary,
    index: int,
    channel: ChannelRecord,
    now: datetime,
    timezone_str: str
) -> NowNextResponse:
    loaded = library.loaded_guide
    if loaded is None:
        return NowNextResponse(index=index, title=channel.title)

    guide_channel_id = match_channel_id(channel, loaded.guide, loaded.reconciliation)
    if guide_channel_id is None:
        return NowNextResponse(index=index, title=channel.title)

    now_next = find_now_next(loaded.guide.programs_by_channel_id[guide_channel_id], now)
    return NowNextResponse(
        index=index,
        title=channel.title,
        guide_channel_id=guide_channel_id,
        current=program_to_response(now_next.current, timezone_str) if now_next.current else None,
        next=program_to_response(now_next.next, timezone_str) if now_next.next else None,
    )


def _require_channel(library: ChannelLibrary, index: int) -> ChannelRecord:
    channel = library.get_channel(index)
    if channel is None:
        raise ChannelNotFoundError(index)
    return channel
