"""
Reconciliation Service

Matches playlist channels to guide channels when the two sources do not share
a reliable identifier: explicit tvg-id first, then normalized display name.
"""
import logging
from collections.abc import Mapping

from iptvguide.services.guide_types import (
    ChannelRecord,
    GuideIndex,
    ProgramEntry,
    ReconciliationIndex,
    UNKNOWN_TITLE,
)
from iptvguide.utils.names import normalize_name

logger = logging.getLogger(__name__)


def build_reconciliation_index(source: GuideIndex | Mapping[str, str]) -> ReconciliationIndex:
    """
    Build the normalized-name lookup for a loaded guide

    Args:
        source: Parsed guide, or its channel id -> display name mapping

    Returns:
        ReconciliationIndex keeping every id that shares a normalized name, in first-seen order
    """
    channel_id_to_name = source.channel_id_to_name if isinstance(source, GuideIndex) else source

    index = ReconciliationIndex()
    for channel_id, name in channel_id_to_name.items():
        index.by_normalized_name.setdefault(normalize_name(name), []).append(channel_id)

    collisions = sum(1 for ids in index.by_normalized_name.values() if len(ids) > 1)
    logger.debug(
        f"Reconciliation index built: {len(index.by_normalized_name)} names, {collisions} shared by several ids"
    )

    return index


def match_channel_id(
    channel: ChannelRecord,
    guide: GuideIndex,
    reconciliation: ReconciliationIndex
) -> str | None:
    """
    Find the guide channel id whose programmes belong to a playlist channel

    Returns:
        The matched guide channel id, or None when the channel has no guide coverage
    """
    programs_by_id = guide.programs_by_channel_id

    if channel.guide_id and programs_by_id.get(channel.guide_id):
        return channel.guide_id

    for candidate_id in reconciliation.candidates(normalize_name(_lookup_name(channel))):
        if programs_by_id.get(candidate_id):
            return candidate_id

    return None


def match_programs(
    channel: ChannelRecord,
    guide: GuideIndex,
    reconciliation: ReconciliationIndex
) -> list[ProgramEntry] | None:
    """Return the sorted programme list matched to a channel, or None"""
    channel_id = match_channel_id(channel, guide, reconciliation)
    if channel_id is None:
        return None
    return guide.programs_by_channel_id[channel_id]


def _lookup_name(channel: ChannelRecord) -> str:
    if channel.title == UNKNOWN_TITLE:
        return channel.raw_attributes.get("tvg-name") or channel.title
    return channel.title
