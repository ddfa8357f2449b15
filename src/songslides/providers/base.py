from abc import ABC, abstractmethod

from ..models import Candidate, RawLyrics


class CandidateSearch(ABC):
    """Abstract base class for song search providers."""

    @abstractmethod
    def search(self, query: str) -> list[Candidate]:
        """Return candidates for *query*, best match first.

        Raises FetchError on HTTP-level failures.
        """


class LyricsFetcher(ABC):
    """Abstract base class for providers that download raw lyrics."""

    @classmethod
    @abstractmethod
    def can_handle(cls, url: str) -> bool:
        """Return True if this fetcher can handle the given URL."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """Fetch the page at url and return raw HTML.

        Raises FetchError on HTTP-level failures.
        """

    @abstractmethod
    def extract(self, html: str, url: str) -> RawLyrics:
        """Parse HTML and return the page's raw lyrics text.

        The text is returned as found; cleaning and structuring happen in
        :mod:`songslides.lyrics`.

        Raises ParseError if expected content cannot be found.
        """

    def scrape(self, url: str) -> RawLyrics:
        """Convenience method: fetch + extract."""
        html = self.fetch(url)
        return self.extract(html, url)
