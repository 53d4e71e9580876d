"""
Services package for IPTV Guide Service

This package contains the playlist/guide parsers, channel-to-guide
reconciliation, now/next resolution and the query layer built on them.
"""
from iptvguide.services.browse_service import build_channel_rows, filter_channels
from iptvguide.services.channel_query_service import (
    ChannelNotFoundError,
    get_now_next,
    get_now_next_batch,
    get_schedule,
    list_channels,
    list_rows,
)
from iptvguide.services.library_service import ChannelLibrary, get_channel_library
from iptvguide.services.now_next_service import programs_for_day, resolve_now_next
from iptvguide.services.playlist_parser_service import parse_playlist
from iptvguide.services.reconciliation_service import build_reconciliation_index, match_programs
from iptvguide.services.xmltv_parser_service import GuideParseError, parse_guide

__all__ = [
    'parse_playlist',
    'parse_guide',
    'build_reconciliation_index',
    'resolve_now_next',
    'match_programs',
    'programs_for_day',
    'filter_channels',
    'build_channel_rows',
    'GuideParseError',
    'ChannelLibrary',
    'get_channel_library',
    'ChannelNotFoundError',
    'get_now_next',
    'get_now_next_batch',
    'get_schedule',
    'list_channels',
    'list_rows',
]
