"""Song search against the MusicBrainz recording index.

Endpoint::

    GET https://musicbrainz.org/ws/2/recording/?query=<q>&fmt=json&limit=<n>

Response fields used:
    recordings[].id                         → Candidate.id ("mb:<id>")
    recordings[].title                      → Candidate.title
    recordings[].score (0-100)              → Candidate.score (0-1)
    recordings[]."artist-credit"[0].name    → Candidate.artist
"""

import logging
from collections import OrderedDict

import httpx

from ..exceptions import FetchError, ParseError
from ..models import Candidate
from .base import CandidateSearch

logger = logging.getLogger(__name__)

SEARCH_URL = "https://musicbrainz.org/ws/2/recording/"

_HEADERS = {
    "Accept": "application/json",
    # MusicBrainz asks clients to identify themselves.
    "User-Agent": "songslides/0.1.0",
}

_MIN_QUERY_LEN = 2
_MAX_LIMIT = 25


class SearchCache:
    """Bounded LRU cache of search results keyed by normalized query."""

    def __init__(self, max_entries: int = 128):
        self.max_entries = max_entries
        self._entries: OrderedDict[str, tuple[Candidate, ...]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> list[Candidate] | None:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return list(self._entries[key])

    def put(self, key: str, candidates: list[Candidate]) -> None:
        self._entries[key] = tuple(candidates)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)


def _clamp_score(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _artist_name(credits: list | None) -> str | None:
    if not credits:
        return None
    first = credits[0] or {}
    name = first.get("name") or (first.get("artist") or {}).get("name")
    if isinstance(name, str) and name.strip():
        return name.strip()
    return None


def parse_recordings(data: dict) -> list[Candidate]:
    """Turn a MusicBrainz recording-search payload into ranked candidates."""
    recordings = data.get("recordings") if isinstance(data, dict) else None
    candidates: list[Candidate] = []
    for rec in recordings or []:
        if not isinstance(rec.get("id"), str) or not isinstance(rec.get("title"), str):
            continue
        score = rec.get("score")
        candidates.append(
            Candidate(
                id=f"mb:{rec['id']}",
                title=rec["title"],
                artist=_artist_name(rec.get("artist-credit")),
                score=_clamp_score(score / 100) if isinstance(score, (int, float)) else 0.5,
            )
        )
    candidates.sort(key=lambda c: c.score, reverse=True)
    return candidates


class MusicBrainzSearch(CandidateSearch):
    """Recording search via the public MusicBrainz web service.

    Pass a :class:`SearchCache` to reuse results across calls; without one
    every search goes to the network.
    """

    def __init__(self, cache: SearchCache | None = None, limit: int = 12, timeout: float = 15):
        self.cache = cache
        self.limit = min(max(limit, 1), _MAX_LIMIT)
        self.timeout = timeout

    def search(self, query: str) -> list[Candidate]:
        q = query.strip()
        if len(q) < _MIN_QUERY_LEN:
            return []

        key = q.lower()
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("search cache hit for %r", q)
                return cached

        logger.info("searching MusicBrainz for %r", q)
        try:
            resp = httpx.get(
                SEARCH_URL,
                params={"query": q, "fmt": "json", "limit": self.limit},
                headers=_HEADERS,
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise FetchError(SEARCH_URL, 0) from exc
        if resp.status_code != 200:
            raise FetchError(SEARCH_URL, resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            raise ParseError(SEARCH_URL, "Response is not valid JSON") from exc
        candidates = parse_recordings(data)

        if self.cache is not None:
            self.cache.put(key, candidates)
        return candidates
