"""Section header recognition.

Maps header lines to :class:`~songslides.models.SectionLabel`:

+------------------------------------------+-------------------+
| Header line (case-insensitive)           | Label             |
+==========================================+===================+
| ``[Verse 2]``, ``Verse 2:``, ``verse``   | ``Verse 2`` / 1   |
+------------------------------------------+-------------------+
| ``Chorus``, ``[Chorus 2]``               | ``Chorus``        |
+------------------------------------------+-------------------+
| ``Pre-Chorus``, ``Pre Chorus``,          | ``Pre-Chorus``    |
| ``Prechorus``                            |                   |
+------------------------------------------+-------------------+
| ``Bridge``, ``Tag``, ``Outro``, ``Intro``| same name         |
+------------------------------------------+-------------------+
| ``[Other]``, ``[Solo]``, ``[Break]``, ...| ``Other``         |
| (brackets only)                          |                   |
+------------------------------------------+-------------------+
"""

import re

from ..models import SectionKind, SectionLabel

_BRACKET_RE = re.compile(r"^\[([^\]]+)\]$")

_HEADER_RE = re.compile(
    r"^(verse|chorus|pre[- ]?chorus|bridge|tag|outro|intro)(?:\s+(\d+))?\s*:?$",
    re.IGNORECASE,
)

# Song parts outside the taxonomy; only recognized inside brackets, since a
# bare "Break" or "Hook" line may well be a lyric.
_OTHER_PART_RE = re.compile(
    r"^(?:other|solo|interlude|instrumental|coda|refrain|hook|ending|vamp|turnaround|break)"
    r"(?:\s+\d+)?\s*:?$",
    re.IGNORECASE,
)

_KINDS = {
    "chorus": SectionKind.CHORUS,
    "prechorus": SectionKind.PRE_CHORUS,
    "bridge": SectionKind.BRIDGE,
    "tag": SectionKind.TAG,
    "outro": SectionKind.OUTRO,
    "intro": SectionKind.INTRO,
}


def parse_header(line: str) -> SectionLabel | None:
    """Return the section label for a header line, or None for any other line."""
    stripped = line.strip()
    if not stripped:
        return None

    bracket = _BRACKET_RE.match(stripped)
    candidate = bracket.group(1).strip() if bracket else stripped

    m = _HEADER_RE.match(candidate)
    if not m:
        if bracket and _OTHER_PART_RE.match(candidate):
            return SectionLabel(SectionKind.OTHER)
        return None

    kind = re.sub(r"[- ]", "", m.group(1).lower())
    if kind == "verse":
        return SectionLabel.verse(int(m.group(2)) if m.group(2) else 1)
    return SectionLabel(_KINDS.get(kind, SectionKind.OTHER))


def has_headers(lines: list[str]) -> bool:
    return any(parse_header(line) is not None for line in lines)
