"""
Unit tests for the channel-to-guide matching cascade.
"""
from datetime import datetime, timezone

from iptvguide.services.guide_types import ChannelRecord, GuideIndex, ProgramEntry
from iptvguide.services.reconciliation_service import (
    build_reconciliation_index,
    match_channel_id,
    match_programs,
)
from iptvguide.services.xmltv_parser_service import parse_guide


def program(title: str, start_hour: int = 18) -> ProgramEntry:
    return ProgramEntry(
        start=datetime(2025, 1, 1, start_hour, tzinfo=timezone.utc),
        stop=datetime(2025, 1, 1, start_hour + 1, tzinfo=timezone.utc),
        title=title,
    )


class TestBuildReconciliationIndex:

    def test_collisions_keep_all_ids_in_first_seen_order(self):
        index = build_reconciliation_index({"b": "BBC One", "a": "bbc-one", "c": "ITV"})

        assert index.by_normalized_name == {"bbc one": ["b", "a"], "itv": ["c"]}

    def test_accepts_guide_index(self, guide_text):
        index = build_reconciliation_index(parse_guide(guide_text))

        assert index.candidates("espn hd") == ["espn.us"]
        assert index.candidates("missing") == []


class TestMatching:
    """Explicit id first, then normalized name."""

    def test_guide_id_takes_precedence(self):
        guide = GuideIndex(
            channel_id_to_name={"x": "Other Name", "y": "BBC One"},
            programs_by_channel_id={"x": [program("By id")], "y": [program("By name")]},
        )
        channel = ChannelRecord(title="BBC One", stream_url="http://x", guide_id="x")

        assert match_channel_id(channel, guide, build_reconciliation_index(guide)) == "x"

    def test_unknown_guide_id_falls_back_to_name(self):
        guide = GuideIndex(
            channel_id_to_name={"X": "bbc one"},
            programs_by_channel_id={"X": [program("Show")]},
        )
        channel = ChannelRecord(title="BBC One", stream_url="http://x", guide_id="nope")

        assert match_programs(channel, guide, build_reconciliation_index(guide))[0].title == "Show"

    def test_name_match_ignores_case(self):
        guide = parse_guide(
            '<tv><channel id="X"><display-name>bbc one</display-name></channel>'
            '<programme channel="X" start="20250101180000" stop="20250101190000"><title>T</title></programme></tv>'
        )
        channel = ChannelRecord(title="BBC One", stream_url="http://x", guide_id="")

        assert match_channel_id(channel, guide, build_reconciliation_index(guide)) == "X"

    def test_first_candidate_with_programmes_wins(self):
        guide = GuideIndex(
            channel_id_to_name={"empty": "BBC One", "second": "BBC-ONE", "third": "bbc one"},
            programs_by_channel_id={"second": [program("Second")], "third": [program("Third")]},
        )
        channel = ChannelRecord(title="BBC One", stream_url="http://x")

        assert match_channel_id(channel, guide, build_reconciliation_index(guide)) == "second"

    def test_unknown_title_uses_tvg_name_hint(self):
        guide = GuideIndex(
            channel_id_to_name={"h": "Hint"},
            programs_by_channel_id={"h": [program("Hinted")]},
        )
        channel = ChannelRecord(
            title="Unknown",
            stream_url="http://x",
            raw_attributes={"tvg-name": "HINT"},
        )

        assert match_channel_id(channel, guide, build_reconciliation_index(guide)) == "h"

    def test_no_match(self):
        guide = GuideIndex(channel_id_to_name={"a": "A"}, programs_by_channel_id={"a": [program("A")]})
        channel = ChannelRecord(title="Nothing Like It", stream_url="http://x")

        assert match_programs(channel, guide, build_reconciliation_index(guide)) is None

    def test_match_is_not_stored_on_channel(self):
        guide = GuideIndex(channel_id_to_name={"a": "A"}, programs_by_channel_id={"a": [program("A")]})
        channel = ChannelRecord(title="A", stream_url="http://x")

        match_programs(channel, guide, build_reconciliation_index(guide))

        assert channel.guide_id == ""
