"""
Now/Next Service

Resolves the programme airing at a given instant, and the one after it, for a
playlist channel. Called once per channel per render, so it only reads the
reconciliation index built at guide load time.
"""
from datetime import datetime, timezone
from collections.abc import Sequence

from iptvguide.services.guide_types import (
    ChannelRecord,
    GuideIndex,
    NowNext,
    ProgramEntry,
    ReconciliationIndex,
)
from iptvguide.services.reconciliation_service import match_programs


def resolve_now_next(
    channel: ChannelRecord,
    guide: GuideIndex,
    reconciliation: ReconciliationIndex,
    now: datetime
) -> NowNext:
    """
    Get the current and next programme for a channel

    Args:
        channel: Playlist channel
        guide: Loaded guide index
        reconciliation: Name index built from the same guide
        now: Query instant (naive values are taken as UTC)

    Returns:
        NowNext with either field None when not applicable
    """
    programs = match_programs(channel, guide, reconciliation)
    if not programs:
        return NowNext()

    return find_now_next(programs, now)


def find_now_next(programs: Sequence[ProgramEntry], now: datetime) -> NowNext:
    """Scan a start-sorted programme list for the entry containing now and its successor"""
    now = _as_utc(now)

    for i, program in enumerate(programs):
        if program.start <= now < program.stop:
            following = programs[i + 1] if i + 1 < len(programs) else None
            return NowNext(current=program, next=following)
        if program.start > now:
            return NowNext(next=program)

    return NowNext()


def programs_for_day(
    programs: Sequence[ProgramEntry],
    day_start: datetime,
    day_end: datetime
) -> list[ProgramEntry]:
    """Programmes overlapping [day_start, day_end), in list order"""
    day_start = _as_utc(day_start)
    day_end = _as_utc(day_end)
    return [p for p in programs if p.stop > day_start and p.start < day_end]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
