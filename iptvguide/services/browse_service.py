"""
Browse Service

Search and group playlist channels into the rows a channel browser displays.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from iptvguide.services.guide_types import ChannelRecord, DEFAULT_GROUP


@dataclass(slots=True)
class ChannelRow:
    """A titled row of channels, each paired with its playlist index."""
    title: str
    channels: list[tuple[int, ChannelRecord]] = field(default_factory=list)


def filter_channels(
    channels: Sequence[ChannelRecord],
    query: str = "",
    group: str | None = None
) -> list[tuple[int, ChannelRecord]]:
    """
    Case-insensitive title search with an optional exact group filter

    Returns:
        (playlist index, channel) pairs in playlist order
    """
    needle = (query or "").lower()
    return [
        (index, channel)
        for index, channel in enumerate(channels)
        if needle in channel.title.lower() and (group is None or channel.group == group)
    ]


def build_channel_rows(
    channels: Sequence[ChannelRecord] | Sequence[tuple[int, ChannelRecord]]
) -> list[ChannelRow]:
    """
    Group channels by category, largest rows first

    Rows with the same size keep the order their group was first seen in.
    Accepts either plain channels or the (index, channel) pairs from filter_channels.
    """
    rows: dict[str, ChannelRow] = {}

    for position, item in enumerate(channels):
        index, channel = item if isinstance(item, tuple) else (position, item)
        title = channel.group or DEFAULT_GROUP
        rows.setdefault(title, ChannelRow(title=title)).channels.append((index, channel))

    return sorted(rows.values(), key=lambda row: len(row.channels), reverse=True)
