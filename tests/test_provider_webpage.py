from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from songslides.exceptions import FetchError, ParseError
from songslides.lyrics.cleaner import clean_lines
from songslides.providers.webpage import WebPageLyricsFetcher

FIXTURE = Path(__file__).parent / "fixtures" / "webpage" / "firm-foundation.html"
TEST_URL = "https://lyrics.example.com/songs/firm-foundation"


def load_fixture() -> str:
    return FIXTURE.read_text(encoding="utf-8")


def _response(status_code=200, text="") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    return resp


# ---------------------------------------------------------------------------
# can_handle
# ---------------------------------------------------------------------------


def test_can_handle_http_urls():
    assert WebPageLyricsFetcher.can_handle(TEST_URL)
    assert WebPageLyricsFetcher.can_handle("http://example.com/song")


def test_cannot_handle_other_schemes():
    assert not WebPageLyricsFetcher.can_handle("ftp://example.com/song")
    assert not WebPageLyricsFetcher.can_handle("lyrics.txt")


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------


def test_extract_title_prefers_og_title():
    lyrics = WebPageLyricsFetcher().extract(load_fixture(), TEST_URL)
    assert lyrics.title == "Firm Foundation (He Won't)"


def test_extract_song_id_is_url():
    lyrics = WebPageLyricsFetcher().extract(load_fixture(), TEST_URL)
    assert lyrics.song_id == TEST_URL


def test_extract_keeps_line_breaks():
    lyrics = WebPageLyricsFetcher().extract(load_fixture(), TEST_URL)
    lines = lyrics.raw.split("\n")
    assert lines[0] == "Christ is my firm foundation"
    assert lines[1] == "The rock on which I stand"
    assert "" in lines


def test_extract_joins_all_containers():
    lyrics = WebPageLyricsFetcher().extract(load_fixture(), TEST_URL)
    assert lyrics.raw.count("Christ is my firm foundation") == 2


def test_extract_skips_scripts_and_ads():
    lyrics = WebPageLyricsFetcher().extract(load_fixture(), TEST_URL)
    assert "trackView" not in lyrics.raw
    assert "Advertisement" not in lyrics.raw


def test_extract_output_cleans_into_stanzas():
    lyrics = WebPageLyricsFetcher().extract(load_fixture(), TEST_URL)
    assert clean_lines(lyrics.raw)[:5] == [
        "Christ is my firm foundation",
        "The rock on which I stand",
        "When everything around me's shaking",
        "I've never been so glad",
        "",
    ]


def test_extract_falls_back_to_pre_and_h1():
    html = "<html><body><h1>Amazing Grace</h1><pre>Amazing grace\nHow sweet the sound</pre></body></html>"
    lyrics = WebPageLyricsFetcher().extract(html, TEST_URL)
    assert lyrics.title == "Amazing Grace"
    assert lyrics.raw == "Amazing grace\nHow sweet the sound"


def test_extract_lyrics_class_with_paragraphs():
    html = '<div class="lyrics"><p>line one</p><p>line two</p></div>'
    lyrics = WebPageLyricsFetcher().extract(html, TEST_URL)
    assert clean_lines(lyrics.raw) == ["line one", "", "line two"]


def test_extract_title_from_url_slug():
    html = '<div id="lyrics">some words</div>'
    lyrics = WebPageLyricsFetcher().extract(html, TEST_URL + "/")
    assert lyrics.title == "Firm Foundation"


def test_extract_no_container_raises():
    with pytest.raises(ParseError, match="No lyrics container"):
        WebPageLyricsFetcher().extract("<html><body><p>nothing here</p></body></html>", TEST_URL)


def test_extract_empty_container_raises():
    with pytest.raises(ParseError, match="empty"):
        WebPageLyricsFetcher().extract('<div class="lyrics">   </div>', TEST_URL)


# ---------------------------------------------------------------------------
# fetch / scrape
# ---------------------------------------------------------------------------


def test_fetch_returns_html():
    with patch("songslides.providers.webpage.httpx.get", return_value=_response(text="<html></html>")) as get:
        html = WebPageLyricsFetcher(timeout=5).fetch(TEST_URL)
    assert html == "<html></html>"
    _, kwargs = get.call_args
    assert "Mozilla" in kwargs["headers"]["User-Agent"]
    assert kwargs["timeout"] == 5


def test_fetch_non_200_raises():
    with patch("songslides.providers.webpage.httpx.get", return_value=_response(status_code=403)):
        with pytest.raises(FetchError) as excinfo:
            WebPageLyricsFetcher().fetch(TEST_URL)
    assert excinfo.value.status_code == 403
    assert excinfo.value.url == TEST_URL


def test_fetch_network_error_raises():
    error = httpx.ConnectError("connection refused")
    with patch("songslides.providers.webpage.httpx.get", side_effect=error):
        with pytest.raises(FetchError) as excinfo:
            WebPageLyricsFetcher().fetch(TEST_URL)
    assert excinfo.value.status_code == 0


def test_scrape_fetches_and_extracts():
    with patch("songslides.providers.webpage.httpx.get", return_value=_response(text=load_fixture())):
        lyrics = WebPageLyricsFetcher().scrape(TEST_URL)
    assert lyrics.title == "Firm Foundation (He Won't)"
    assert lyrics.raw.startswith("Christ is my firm foundation")
