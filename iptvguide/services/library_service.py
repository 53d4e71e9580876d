"""
Channel Library

Holds the currently loaded playlist and guide, with the reconciliation index
built from that guide. The HTTP layer reaches one shared instance through
get_channel_library().
"""
import asyncio
import logging
from dataclasses import dataclass, field

from iptvguide.services.guide_loader_service import parse_guide_async
from iptvguide.services.guide_types import ChannelRecord, GuideIndex, ReconciliationIndex
from iptvguide.services.playlist_parser_service import parse_playlist
from iptvguide.services.reconciliation_service import build_reconciliation_index
from iptvguide.services.xmltv_parser_service import GuideParseError, parse_guide
from iptvguide.utils.logging_helpers import (
    log_guide_summary,
    log_playlist_summary,
    log_section_end,
    log_section_failed,
    log_section_start,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadedGuide:
    """A guide together with the reconciliation index built from it."""
    guide: GuideIndex = field(default_factory=GuideIndex)
    reconciliation: ReconciliationIndex = field(default_factory=ReconciliationIndex)


class ChannelLibrary:
    """
    Owns the loaded channel list and guide.

    The playlist and the guide are loaded independently. A guide and its
    reconciliation index are replaced together, and only after the new
    document parsed successfully, so a failed load leaves the previous
    guide in place.
    """

    def __init__(self):
        """Initialize an empty library with a guide load lock."""
        self._channels: list[ChannelRecord] = []
        self._loaded_guide: LoadedGuide | None = None
        self._guide_lock = asyncio.Lock()

    @property
    def channels(self) -> list[ChannelRecord]:
        return self._channels

    @property
    def loaded_guide(self) -> LoadedGuide | None:
        return self._loaded_guide

    @property
    def has_guide(self) -> bool:
        return self._loaded_guide is not None

    def load_playlist(self, text: str) -> list[ChannelRecord]:
        """
        Parse playlist text and replace the current channel list.

        Args:
            text: Full M3U content

        Returns:
            The new channel list
        """
        log_section_start(logger, "playlist load")
        channels = parse_playlist(text)
        self._channels = channels
        log_playlist_summary(logger, len(channels), len({channel.group for channel in channels}))
        log_section_end(logger, "playlist load")
        return channels

    def load_guide(self, xml_text: str | bytes) -> LoadedGuide:
        """
        Parse guide text synchronously and replace the current guide.

        Raises:
            GuideParseError: If the markup is malformed (current guide is kept)
        """
        log_section_start(logger, "guide load")
        try:
            guide = parse_guide(xml_text)
        except GuideParseError as e:
            log_section_failed(logger, "guide load", e)
            raise
        return self._install_guide(guide)

    async def load_guide_async(
        self,
        xml_text: str | bytes,
        *,
            parse_timeout_seconds: int | None = None
    ) -> LoadedGuide:
        """
        Parse guide text in the thread pool and replace the current guide.

        Concurrent loads are serialized; the last one to finish wins.

        Raises:
            GuideParseError: If the markup is malformed or parsing times out (current guide is kept)
        """
        async with self._guide_lock:
            log_section_start(logger, "guide load")
            try:
                guide = await parse_guide_async(xml_text, parse_timeout_seconds=parse_timeout_seconds)
            except GuideParseError as e:
                log_section_failed(logger, "guide load", e)
                raise
            return self._install_guide(guide)

    def _install_guide(self, guide: GuideIndex) -> LoadedGuide:
        loaded = LoadedGuide(guide=guide, reconciliation=build_reconciliation_index(guide))
        self._loaded_guide = loaded
        log_guide_summary(
            logger,
            len(guide.channel_id_to_name),
            guide.program_count,
            len(loaded.reconciliation.by_normalized_name),
        )
        log_section_end(logger, "guide load")
        return loaded

    def get_channel(self, index: int) -> ChannelRecord | None:
        """Return the channel at a playlist index, or None if out of range."""
        if 0 <= index < len(self._channels):
            return self._channels[index]
        return None


# Global singleton instance
_library: ChannelLibrary | None = None


def get_channel_library() -> ChannelLibrary:
    """
    Get or create the global channel library singleton.

    Returns:
        The global ChannelLibrary instance
    """
    global _library
    if _library is None:
        _library = ChannelLibrary()
    return _library


def reset_channel_library() -> None:
    """
    Reset the channel library (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _library
    _library = None
