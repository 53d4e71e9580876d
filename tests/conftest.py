import pytest
from fastapi.testclient import TestClient

from iptvguide.main import app
from iptvguide.services import ChannelLibrary, get_channel_library
from iptvguide.services.library_service import reset_channel_library


PLAYLIST_TEXT = (
    "#EXTM3U\n"
    '#EXTINF:-1 tvg-id="bbc1" tvg-name="BBC One" tvg-logo="http://logos/bbc1.png" group-title="UK",BBC One\n'
    "http://x/bbc1.m3u8\n"
    '#EXTINF:-1 tvg-id="" tvg-name="ESPN HD" group-title="Sports",ESPN HD!!\n'
    "http://x/espn.m3u8\n"
    '#EXTINF:-1 tvg-chno="7" group-title="UK",ITV 1\n'
    "http://x/itv.m3u8\n"
    '#EXTINF:-1 group-title="News",No Guide News\n'
    "http://x/news.m3u8\n"
)

GUIDE_TEXT = """<?xml version="1.0" encoding="UTF-8"?>
<tv>
  <channel id="bbc1"><display-name>BBC One</display-name></channel>
  <channel id="espn.us"><display-name>espn-hd</display-name></channel>
  <channel id="itv"><display-name>ITV 1</display-name></channel>
  <programme channel="bbc1" start="20250101190000 +0000" stop="20250101200000 +0000">
    <title>Evening Show</title>
  </programme>
  <programme channel="bbc1" start="20250101180000 +0000" stop="20250101190000 +0000">
    <title>News</title><desc>Headlines</desc><category>News</category>
  </programme>
  <programme channel="espn.us" start="20250101173000 +0000" stop="20250101193000 +0000">
    <title>Match</title>
  </programme>
  <programme channel="itv" start="2025-01-01T18:00:00Z" stop="20250101190000 +0000">
    <title>Dropped</title>
  </programme>
</tv>
"""


@pytest.fixture
def playlist_text() -> str:
    return PLAYLIST_TEXT


@pytest.fixture
def guide_text() -> str:
    return GUIDE_TEXT


@pytest.fixture
def library() -> ChannelLibrary:
    reset_channel_library()
    yield get_channel_library()
    reset_channel_library()


@pytest.fixture
def client(library):
    app.dependency_overrides[get_channel_library] = lambda: library
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
