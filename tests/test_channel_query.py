from datetime import datetime, timezone

import pytest

from iptvguide.services import ChannelLibrary, ChannelNotFoundError, get_schedule


@pytest.fixture
def loaded_library(playlist_text, guide_text) -> ChannelLibrary:
    library = ChannelLibrary()
    library.load_playlist(playlist_text)
    library.load_guide(guide_text)
    return library


class TestGetSchedule:

    def test_day_programmes_in_order(self, loaded_library):
        now = datetime(2025, 1, 1, 12, tzinfo=timezone.utc)

        response = get_schedule(loaded_library, 0, 0, "UTC", now=now)

        assert response.guide_channel_id == "bbc1"
        assert response.day_start == "2025-01-01T00:00:00+00:00"
        assert response.day_end == "2025-01-02T00:00:00+00:00"
        assert [p.title for p in response.programs] == ["News", "Evening Show"]

    def test_other_day_is_empty(self, loaded_library):
        now = datetime(2025, 1, 1, 12, tzinfo=timezone.utc)

        response = get_schedule(loaded_library, 0, 1, "UTC", now=now)

        assert response.programs == []

    def test_day_in_other_timezone(self, loaded_library):
        # 19:00-20:00 UTC falls on Jan 2 in Auckland (+13:00)
        now = datetime(2025, 1, 1, 12, tzinfo=timezone.utc)

        response = get_schedule(loaded_library, 0, 0, "Pacific/Auckland", now=now)

        assert [p.title for p in response.programs] == ["News", "Evening Show"]
        assert response.programs[0].start_time == "2025-01-02T07:00:00+13:00"

    def test_unknown_index(self, loaded_library):
        with pytest.raises(ChannelNotFoundError):
            get_schedule(loaded_library, 10)
