from unittest.mock import MagicMock, patch

import httpx
import pytest

from songslides.exceptions import FetchError, ParseError
from songslides.models import Candidate
from songslides.providers.musicbrainz import SEARCH_URL, MusicBrainzSearch, SearchCache, parse_recordings

PAYLOAD = {
    "recordings": [
        {
            "id": "abc-1",
            "title": "Tremble",
            "score": 80,
            "artist-credit": [{"name": "Mosaic MSC"}],
        },
        {
            "id": "abc-2",
            "title": "Tremble (Live)",
            "score": 100,
            "artist-credit": [{"artist": {"name": "Mosaic MSC"}}],
        },
        {"id": "abc-3", "title": "Tremble Cover"},
        {"id": 4, "title": "Bad id"},
        {"id": "abc-5"},
    ]
}


def _response(status_code=200, payload=None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload if payload is not None else PAYLOAD
    return resp


# ---------------------------------------------------------------------------
# parse_recordings
# ---------------------------------------------------------------------------


def test_parse_recordings_ranked_by_score():
    candidates = parse_recordings(PAYLOAD)
    assert [c.id for c in candidates] == ["mb:abc-2", "mb:abc-1", "mb:abc-3"]
    assert [c.score for c in candidates] == [1.0, 0.8, 0.5]


def test_parse_recordings_artist_credit_forms():
    candidates = {c.id: c for c in parse_recordings(PAYLOAD)}
    assert candidates["mb:abc-1"].artist == "Mosaic MSC"
    assert candidates["mb:abc-2"].artist == "Mosaic MSC"
    assert candidates["mb:abc-3"].artist is None


def test_parse_recordings_clamps_score():
    candidates = parse_recordings({"recordings": [{"id": "x", "title": "T", "score": 250}]})
    assert candidates[0].score == 1.0


def test_parse_recordings_missing_list():
    assert parse_recordings({}) == []
    assert parse_recordings([]) == []


# ---------------------------------------------------------------------------
# SearchCache
# ---------------------------------------------------------------------------


def test_cache_evicts_least_recently_used():
    cache = SearchCache(max_entries=2)
    cache.put("a", [])
    cache.put("b", [])
    cache.get("a")
    cache.put("c", [])
    assert len(cache) == 2
    assert cache.get("b") is None
    assert cache.get("a") == []


def test_cache_returns_copies():
    cache = SearchCache()
    stored = [Candidate(id="mb:1", title="Tremble")]
    cache.put("tremble", stored)
    stored.clear()
    first = cache.get("tremble")
    first.clear()
    assert cache.get("tremble") == [Candidate(id="mb:1", title="Tremble")]


# ---------------------------------------------------------------------------
# MusicBrainzSearch
# ---------------------------------------------------------------------------


def test_search_short_query_skips_network():
    with patch("songslides.providers.musicbrainz.httpx.get") as get:
        assert MusicBrainzSearch().search(" a ") == []
    get.assert_not_called()


def test_search_sends_query_and_limit():
    with patch("songslides.providers.musicbrainz.httpx.get", return_value=_response()) as get:
        candidates = MusicBrainzSearch(limit=5).search("  Tremble ")
    assert candidates[0] == Candidate(id="mb:abc-2", title="Tremble (Live)", artist="Mosaic MSC", score=1.0)
    args, kwargs = get.call_args
    assert args == (SEARCH_URL,)
    assert kwargs["params"] == {"query": "Tremble", "fmt": "json", "limit": 5}
    assert "songslides" in kwargs["headers"]["User-Agent"]


def test_search_limit_clamped():
    assert MusicBrainzSearch(limit=100).limit == 25
    assert MusicBrainzSearch(limit=0).limit == 1


def test_search_uses_cache():
    cache = SearchCache()
    search = MusicBrainzSearch(cache=cache)
    with patch("songslides.providers.musicbrainz.httpx.get", return_value=_response()) as get:
        first = search.search("Tremble")
        second = search.search("TREMBLE")
    assert first == second
    assert get.call_count == 1
    assert len(cache) == 1


def test_search_non_200_raises():
    with patch("songslides.providers.musicbrainz.httpx.get", return_value=_response(status_code=503)):
        with pytest.raises(FetchError) as excinfo:
            MusicBrainzSearch().search("Tremble")
    assert excinfo.value.status_code == 503


def test_search_network_error_raises():
    with patch("songslides.providers.musicbrainz.httpx.get", side_effect=httpx.ConnectTimeout("timed out")):
        with pytest.raises(FetchError):
            MusicBrainzSearch().search("Tremble")


def test_search_invalid_json_raises():
    resp = _response()
    resp.json.side_effect = ValueError("not json")
    with patch("songslides.providers.musicbrainz.httpx.get", return_value=resp):
        with pytest.raises(ParseError):
            MusicBrainzSearch().search("Tremble")
