"""Fetcher for plain HTML lyrics pages.

Works on any ``http(s)`` page that keeps its lyrics in one recognizable
element.  Containers are tried in order, and the first one found wins:

    [data-lyrics-container]    (several may exist; their text is joined)
    .lyrics / #lyrics
    <pre>

Title lookup order: ``<meta property="og:title">``, first ``<h1>``,
``<title>``, then the URL slug.  ``<br>`` tags are turned into line breaks
so the text keeps the page's line layout.
"""

import logging

import httpx
from bs4 import BeautifulSoup, NavigableString, Tag

from ..exceptions import FetchError, ParseError
from ..models import RawLyrics
from .base import LyricsFetcher

logger = logging.getLogger(__name__)

_FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/webp,*/*;q=0.8"
    ),
}

_LYRICS_SELECTORS = ("[data-lyrics-container]", ".lyrics", "#lyrics", "pre")

_BLOCK_TAGS = {"p", "div"}


class WebPageLyricsFetcher(LyricsFetcher):
    """Fetcher for generic lyrics pages."""

    def __init__(self, timeout: float = 15):
        self.timeout = timeout

    @classmethod
    def can_handle(cls, url: str) -> bool:
        return url.startswith(("http://", "https://"))

    def fetch(self, url: str) -> str:
        """GET the page with browser-like headers to avoid 403."""
        logger.info("fetching lyrics page %s", url)
        try:
            resp = httpx.get(
                url,
                headers=_FETCH_HEADERS,
                follow_redirects=True,
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise FetchError(url, 0) from exc
        if resp.status_code != 200:
            raise FetchError(url, resp.status_code)
        return resp.text

    def extract(self, html: str, url: str) -> RawLyrics:
        soup = BeautifulSoup(html, "html.parser")

        containers: list[Tag] = []
        for selector in _LYRICS_SELECTORS:
            containers = soup.select(selector)
            if containers:
                break
        if not containers:
            raise ParseError(url, "No lyrics container found")

        text = "\n".join(_element_text(c) for c in containers).strip()
        if not text:
            raise ParseError(url, "Lyrics container is empty")

        return RawLyrics(song_id=url, title=_page_title(soup, url), raw=text)


def _element_text(element: Tag) -> str:
    """Text of *element* with ``<br>`` and block children as line breaks.

    ``<script>`` and ``<style>`` content is skipped.
    """
    parts: list[str] = []
    for child in element.children:
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag):
            if child.name == "br":
                parts.append("\n")
            elif child.name in ("script", "style"):
                continue
            elif child.name in _BLOCK_TAGS:
                parts.append("\n" + _element_text(child) + "\n")
            else:
                parts.append(_element_text(child))
    return "".join(parts)


def _page_title(soup: BeautifulSoup, url: str) -> str:
    og = soup.find("meta", attrs={"property": "og:title"})
    if og and og.get("content"):
        return og["content"].strip()
    for tag in (soup.find("h1"), soup.title):
        if tag and tag.get_text(strip=True):
            return tag.get_text(strip=True)
    return _title_from_url(url)


def _title_from_url(url: str) -> str:
    """Derive a song title from the URL slug as a last-resort fallback."""
    slug = url.rstrip("/").split("/")[-1]
    return slug.replace("-", " ").title()
