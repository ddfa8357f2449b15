from dataclasses import dataclass, field
from enum import Enum


class SectionKind(Enum):
    VERSE = "Verse"
    CHORUS = "Chorus"
    PRE_CHORUS = "Pre-Chorus"
    BRIDGE = "Bridge"
    TAG = "Tag"
    OUTRO = "Outro"
    INTRO = "Intro"
    OTHER = "Other"


@dataclass(frozen=True)
class SectionLabel:
    """A section label from the closed taxonomy.

    Only ``VERSE`` carries a number; every other kind has ``number=None``.
    ``str(label)`` gives the display form: ``"Verse 2"``, ``"Pre-Chorus"``.
    """

    kind: SectionKind
    number: int | None = None

    @classmethod
    def verse(cls, number: int) -> "SectionLabel":
        return cls(SectionKind.VERSE, number if number > 0 else 1)

    @classmethod
    def from_string(cls, text: str) -> "SectionLabel":
        """Parse a rendered label back into a :class:`SectionLabel`.

        Unrecognized text maps to ``Other`` rather than raising.
        """
        text = text.strip()
        head, _, tail = text.partition(" ")
        if head.lower() == "verse":
            tail = tail.strip()
            return cls.verse(int(tail) if tail.isdigit() else 1)
        for kind in SectionKind:
            if kind is not SectionKind.VERSE and kind.value.lower() == text.lower():
                return cls(kind)
        return cls(SectionKind.OTHER)

    def __str__(self) -> str:
        if self.kind is SectionKind.VERSE:
            return f"Verse {self.number}"
        return self.kind.value


@dataclass(frozen=True)
class Section:
    """A labelled run of lyric lines.

    Blank strings inside ``lines`` separate sub-groups; they never appear at
    either end.
    """

    label: SectionLabel
    lines: list[str] = field(default_factory=list)

    @property
    def content_lines(self) -> list[str]:
        return [line for line in self.lines if line.strip()]


@dataclass(frozen=True)
class NormalizedSong:
    """Canonical representation of one song ready for slide splitting."""

    title: str
    artist: str | None = None
    sections: list[Section] = field(default_factory=list)


@dataclass(frozen=True)
class SlideContent:
    """One slide in the generated deck, before rendering."""

    kind: str  # "cover", "title" or "lyrics"
    title: str | None = None
    artist: str | None = None
    section_label: str | None = None
    lines: list[str] = field(default_factory=list)
    date: str | None = None


@dataclass(frozen=True)
class Candidate:
    """A song match returned by a search provider; ``score`` is 0..1."""

    id: str
    title: str
    artist: str | None = None
    score: float = 0.0


@dataclass(frozen=True)
class RawLyrics:
    """Unprocessed lyrics text as returned by a fetcher."""

    song_id: str
    title: str
    raw: str
    artist: str | None = None
