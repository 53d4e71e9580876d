from pydantic import BaseModel, Field, field_validator

from iptvguide.utils.timezone import parse_iso8601_to_utc, get_zone, DateFormatError


def _validate_timezone_name(v: str | None) -> str | None:
    """Validate timezone string"""
    if v is None or v == "UTC":
        return v
    try:
        get_zone(v)
        return v
    except ValueError:
        raise ValueError(f"Invalid timezone: {v}. Must be a valid IANA timezone (e.g., 'Europe/London', 'America/New_York') or 'UTC'")


class PlaylistLoadRequest(BaseModel):
    """Playlist upload"""
    content: str = Field(..., description="Full M3U playlist text")


class GuideLoadRequest(BaseModel):
    """Guide upload"""
    content: str = Field(..., description="Full XMLTV document")


class PlaylistLoadResponse(BaseModel):
    timestamp: str
    channels_loaded: int
    groups: list[str] = Field(..., description="Group titles in first-seen order")


class GuideLoadResponse(BaseModel):
    timestamp: str
    channels: int = Field(..., description="Declared guide channels")
    programs: int = Field(..., description="Programmes kept after timestamp validation")
    channels_with_programs: int
    normalized_names: int = Field(..., description="Distinct normalized display names")


class ChannelResponse(BaseModel):
    """Playlist channel data"""
    index: int = Field(..., description="Position in the loaded playlist")
    title: str
    group: str
    logo_url: str
    guide_id: str
    channel_number: str
    stream_url: str
    attributes: dict[str, str] = Field(default_factory=dict, description="All #EXTINF attributes, verbatim")


class ChannelListResponse(BaseModel):
    total: int
    channels: list[ChannelResponse]


class ChannelRowResponse(BaseModel):
    title: str
    channels: list[ChannelResponse]


class ChannelRowsResponse(BaseModel):
    rows: list[ChannelRowResponse]


class ProgramResponse(BaseModel):
    """Single program data"""
    start_time: str
    stop_time: str
    title: str
    description: str
    category: str


class NowNextRequest(BaseModel):
    """Now/next overlay request for several channels"""
    channel_indices: list[int] | None = Field(None, description="Playlist indices; all channels when omitted")
    at: str | None = Field(None, description="ISO8601 query instant; current time when omitted")
    timezone: str | None = Field(None, description="Timezone for response timestamps (e.g., 'UTC', 'Europe/London')")

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        return _validate_timezone_name(v)

    @field_validator('at')
    @classmethod
    def validate_at_format(cls, v: str | None) -> str | None:
        """Validate ISO8601 datetime format using centralized parser"""
        if v is None:
            return v
        try:
            parse_iso8601_to_utc(v)
            return v
        except DateFormatError:
            raise ValueError(f"Invalid datetime format: {v}. Must be valid ISO8601 format (e.g., '2025-10-09T00:00:00Z')")


class NowNextResponse(BaseModel):
    index: int
    title: str
    guide_channel_id: str | None = Field(None, description="Matched guide channel, if any")
    current: ProgramResponse | None = None
    next: ProgramResponse | None = None


class BatchNowNextResponse(BaseModel):
    timestamp: str
    timezone: str = Field(..., description="Timezone used for all timestamps in response")
    guide_loaded: bool
    channels_requested: int
    channels_matched: int
    results: list[NowNextResponse]


class ScheduleResponse(BaseModel):
    index: int
    title: str
    guide_channel_id: str | None
    timezone: str
    day_start: str
    day_end: str
    programs: list[ProgramResponse]


class ErrorDetail(BaseModel):
    """Standard error detail"""
    code: str = Field(..., description="Error code (e.g., 'GUIDE_PARSE_FAILED')")
    message: str = Field(..., description="Human-readable error message")
    context: dict | None = Field(None, description="Additional context about the error")


class StandardErrorResponse(BaseModel):
    """Standardized error response for all endpoints"""
    status: str = Field("error", description="Status indicator")
    timestamp: str = Field(..., description="ISO8601 timestamp of error")
    error: ErrorDetail = Field(..., description="Error details")
