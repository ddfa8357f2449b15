class SongSlidesError(Exception):
    """Base exception for songslides."""


class FetchError(SongSlidesError):
    """Raised when an HTTP request fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class ParseError(SongSlidesError):
    """Raised when expected content cannot be extracted from a page."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Parse error for {url}: {reason}")


class SettingsError(SongSlidesError):
    """Raised when generation settings or a config file are invalid."""
