"""
Shared dataclasses used across the playlist and guide pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping


UNKNOWN_TITLE = "Unknown"
DEFAULT_GROUP = "Other"
UNKNOWN_PROGRAM_TITLE = "(unknown)"


@dataclass(frozen=True, slots=True)
class ChannelRecord:
    """One playlist entry: #EXTINF metadata plus its stream URL."""
    title: str
    stream_url: str
    group: str = DEFAULT_GROUP
    logo_url: str = ""
    guide_id: str = ""
    channel_number: str = ""
    raw_attributes: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw_attributes", MappingProxyType(dict(self.raw_attributes)))

    def __reduce__(self):
        # mappingproxy cannot be pickled; rebuild from a plain dict copy
        return (
            self.__class__,
            (
                self.title,
                self.stream_url,
                self.group,
                self.logo_url,
                self.guide_id,
                self.channel_number,
                dict(self.raw_attributes),
            ),
        )


@dataclass(frozen=True, slots=True)
class ProgramEntry:
    """A single guide programme with UTC start/stop instants."""
    start: datetime
    stop: datetime
    title: str = UNKNOWN_PROGRAM_TITLE
    description: str = ""
    category: str = ""


@dataclass(slots=True)
class GuideIndex:
    """Parsed representation of one XMLTV document."""
    channel_id_to_name: dict[str, str] = field(default_factory=dict)
    programs_by_channel_id: dict[str, list[ProgramEntry]] = field(default_factory=dict)

    @property
    def program_count(self) -> int:
        return sum(len(programs) for programs in self.programs_by_channel_id.values())


@dataclass(slots=True)
class ReconciliationIndex:
    """Normalized display name -> guide channel ids, in first-seen order."""
    by_normalized_name: dict[str, list[str]] = field(default_factory=dict)

    def candidates(self, key: str) -> list[str]:
        return self.by_normalized_name.get(key, [])


@dataclass(frozen=True, slots=True)
class NowNext:
    current: ProgramEntry | None = None
    next: ProgramEntry | None = None


__all__ = [
    "ChannelRecord",
    "ProgramEntry",
    "GuideIndex",
    "ReconciliationIndex",
    "NowNext",
    "UNKNOWN_TITLE",
    "DEFAULT_GROUP",
    "UNKNOWN_PROGRAM_TITLE",
]
