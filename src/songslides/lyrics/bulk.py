"""Multi-song pastes.

A bulk paste holds the lyrics of several songs one after another, each
introduced by a title marker:

    # Firm Foundation          markdown heading (1-6 hashes)
    [Song] Firm Foundation     bracketed tag, also [Title]
    == Firm Foundation ==      equals banner
    Firm Foundation            a bare line matching an already known title

Song-list pastes ("Tremble, Goodness of God\\nBuild My Life") are handled by
:func:`parse_titles`.
"""

import re
from dataclasses import dataclass

from ..exceptions import SettingsError

MAX_TITLES = 20

_HASH_MARKER_RE = re.compile(r"^#{1,6}\s+(.+)$")
_TAG_MARKER_RE = re.compile(r"^\[(?:song|title)\]\s*(.+)$", re.IGNORECASE)
_EQUALS_MARKER_RE = re.compile(r"^=+\s*(.+?)\s*=+$")
_TITLE_SPLIT_RE = re.compile(r"[,\n]+")


@dataclass(frozen=True)
class LyricsBlock:
    title: str
    lyrics: str


@dataclass(frozen=True)
class LyricsMatch:
    entry_id: str
    title: str
    lyrics: str


def normalize_title_key(text: str) -> str:
    """Comparison key for titles: case, apostrophes and punctuation ignored."""
    key = text.lower()
    key = re.sub(r"[’']", "", key)
    key = re.sub(r"[^a-z0-9 ]", " ", key)
    return re.sub(r"\s+", " ", key).strip()


def _marker_title(line: str, known: set[str]) -> str | None:
    stripped = line.strip()
    if not stripped:
        return None
    for pattern in (_HASH_MARKER_RE, _TAG_MARKER_RE, _EQUALS_MARKER_RE):
        m = pattern.match(stripped)
        if m:
            return m.group(1).strip()
    if normalize_title_key(stripped) in known:
        return stripped
    return None


def parse_bulk_lyrics(text: str, known_titles: list[str] | tuple[str, ...] = ()) -> list[LyricsBlock]:
    """Split a bulk paste into titled lyric blocks.

    Text before the first marker is ignored, and blocks whose lyrics are empty
    are dropped.
    """
    known = {normalize_title_key(t) for t in known_titles}
    blocks: list[LyricsBlock] = []
    title: str | None = None
    buf: list[str] = []

    def flush():
        lyrics = "\n".join(buf).strip()
        if title and lyrics:
            blocks.append(LyricsBlock(title=title, lyrics=lyrics))

    for line in text.replace("\r\n", "\n").split("\n"):
        marker = _marker_title(line, known)
        if marker:
            flush()
            title, buf = marker, []
            continue
        if title:
            buf.append(line)

    flush()
    return blocks


def match_bulk_lyrics(
    blocks: list[LyricsBlock],
    key_to_entry: dict[str, str],
) -> tuple[list[LyricsMatch], list[LyricsBlock]]:
    """Pair blocks with entry ids by normalized title key.

    Returns ``(matches, unmatched)``, both in block order.
    """
    matches: list[LyricsMatch] = []
    unmatched: list[LyricsBlock] = []
    for block in blocks:
        entry_id = key_to_entry.get(normalize_title_key(block.title))
        if entry_id is None:
            unmatched.append(block)
        else:
            matches.append(LyricsMatch(entry_id=entry_id, title=block.title, lyrics=block.lyrics))
    return matches, unmatched


def parse_titles(text: str, limit: int = MAX_TITLES) -> list[str]:
    """Split a song-list paste on commas and newlines, dropping duplicates.

    Duplicates are detected case-insensitively; the first spelling wins.
    Raises :class:`~songslides.exceptions.SettingsError` for more than *limit*
    titles.
    """
    titles: list[str] = []
    seen: set[str] = set()
    for part in _TITLE_SPLIT_RE.split(text):
        title = part.strip()
        if title and title.lower() not in seen:
            seen.add(title.lower())
            titles.append(title)

    if len(titles) > limit:
        raise SettingsError(f"Max {limit} songs per batch (got {len(titles)})")
    return titles
