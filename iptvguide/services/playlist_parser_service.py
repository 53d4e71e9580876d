"""
Playlist Parser Service

Converts M3U playlist text into an ordered list of channel records.
Malformed or incomplete entries are skipped, never fatal.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import re

from iptvguide.services.guide_types import (
    ChannelRecord,
    DEFAULT_GROUP,
    UNKNOWN_TITLE,
)

logger = logging.getLogger(__name__)

EXTINF_MARKER = "#EXTINF"

_ATTRIBUTE_RE = re.compile(r'(\w[\w-]*)\s*=\s*"([^"]*)"')


@dataclass(frozen=True, slots=True)
class _PendingEntry:
    """Metadata from an #EXTINF line waiting for its stream URL."""
    title: str
    attributes: dict[str, str]


def parse_playlist(text: str) -> list[ChannelRecord]:
    """
    Parse M3U playlist text

    Args:
        text: Full playlist content (any line-ending style)

    Returns:
        Channel records in source order, one per #EXTINF/URL pair
    """
    channels: list[ChannelRecord] = []
    pending: _PendingEntry | None = None
    discarded = 0

    for raw_line in (text or "").splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(EXTINF_MARKER):
            if pending is not None:
                discarded += 1
            pending = _parse_extinf(line)
        elif line.startswith("#"):
            # Directives and comments are ignored; they do not drop a pending entry
            continue
        elif pending is not None:
            channels.append(_build_record(pending, line))
            pending = None

    if pending is not None:
        discarded += 1

    if discarded:
        logger.debug(f"Discarded {discarded} #EXTINF entries without a stream URL")
    logger.info(f"Playlist parsing complete: {len(channels)} channels")

    return channels


def parse_attributes(attribute_string: str) -> dict[str, str]:
    """Extract key="value" pairs; the last duplicate key wins"""
    return {key: value for key, value in _ATTRIBUTE_RE.findall(attribute_string)}


def _parse_extinf(line: str) -> _PendingEntry:
    """Split an #EXTINF line into its attribute string and display title"""
    metadata = line[line.find(":") + 1:]

    attribute_part, comma, title_part = metadata.rpartition(",")
    if not comma:
        attribute_part, title_part = metadata, ""

    return _PendingEntry(
        title=title_part.strip(),
        attributes=parse_attributes(attribute_part),
    )


def _build_record(pending: _PendingEntry, stream_url: str) -> ChannelRecord:
    attributes = pending.attributes
    return ChannelRecord(
        title=pending.title or attributes.get("tvg-name") or UNKNOWN_TITLE,
        stream_url=stream_url,
        group=attributes.get("group-title") or DEFAULT_GROUP,
        logo_url=attributes.get("tvg-logo", ""),
        guide_id=attributes.get("tvg-id", ""),
        channel_number=attributes.get("tvg-chno", ""),
        raw_attributes=attributes,
    )
