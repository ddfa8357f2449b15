"""Raw paste → clean lyric lines.

Pasted lyrics usually carry noise from the site or songbook they came from:
CCLI/licence footers, copyright lines, URLs, key/tempo annotations and chord
charts written above the words.  :func:`clean_lines` drops all of that and
normalizes the blank-line layout so later stages can treat a blank line as a
stanza separator and nothing else.
"""

import re

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# Valid chord name: A, Am, Am7, Amaj7, Asus4, Cadd9, G/B, C#m7, Bb
CHORD_NAME_RE = re.compile(
    r"^[A-G][#b]?(?:maj|min|m|sus|dim|aug|add)?\d*(?:/[A-G][#b]?)?$"
)

# Separators inside chord charts: "| G | D/F# | Em |", "(C) [G]", "G, D"
_CHORD_SPLIT_RE = re.compile(r"[|()\[\],\s]+")

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

_METADATA_PREFIXES = (
    "ccli song #",
    "ccli license #",
    "song #",
    "license #",
    "©",
    "(c)",
    "capo",
    "key:",
    "tempo:",
    "time:",
)

_METADATA_FRAGMENTS = (
    "all rights reserved",
    "www.",
    "http://",
    "https://",
)

# Share of tokens that must be chord names for a line to count as a chord line.
_CHORD_TOKEN_RATIO = 0.8


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


def is_metadata_line(line: str) -> bool:
    """Return True for licence, copyright, URL and key/tempo annotation lines."""
    lower = line.strip().lower()
    if not lower:
        return False
    if lower.startswith(_METADATA_PREFIXES):
        return True
    return any(fragment in lower for fragment in _METADATA_FRAGMENTS)


def is_chord_line(line: str) -> bool:
    """Return True if *line* is a chord chart line with no lyric words.

    At least two tokens are required and 80% of them must be chord names.
    Lowercase letters are only allowed inside chord tokens (``Em``, ``Bb``,
    ``Gsus4``), so ``"G D Em C"`` is a chord line but ``"Am I wrong"`` is not.
    """
    tokens = [t for t in _CHORD_SPLIT_RE.split(line.strip()) if t]
    if len(tokens) < 2:
        return False

    chords = [t for t in tokens if CHORD_NAME_RE.match(t)]
    if any(re.search(r"[a-z]", t) for t in tokens if not CHORD_NAME_RE.match(t)):
        return False

    return len(chords) / len(tokens) >= _CHORD_TOKEN_RATIO


# ---------------------------------------------------------------------------
# Blank-line handling
# ---------------------------------------------------------------------------


def collapse_blank_lines(lines: list[str]) -> list[str]:
    """Collapse runs of blank lines to one and drop leading/trailing blanks.

    Blank lines come back as ``""``; other lines are returned unchanged.
    """
    out: list[str] = []
    for line in lines:
        if line.strip():
            out.append(line)
        elif out and out[-1] != "":
            out.append("")
    if out and out[-1] == "":
        out.pop()
    return out


def split_stanzas(lines: list[str]) -> list[list[str]]:
    """Split *lines* into stanzas at blank lines.  Empty stanzas are skipped."""
    stanzas: list[list[str]] = []
    current: list[str] = []
    for line in lines:
        if line.strip():
            current.append(line)
            continue
        if current:
            stanzas.append(current)
        current = []
    if current:
        stanzas.append(current)
    return stanzas


# ---------------------------------------------------------------------------
# Full cleaner
# ---------------------------------------------------------------------------


def clean_lines(raw: str) -> list[str]:
    """Turn a raw lyrics paste into an ordered list of clean lines.

    Each line is stripped of surrounding whitespace.  Metadata lines and
    chord-only lines are discarded, then blank runs are collapsed so the
    result contains at most one ``""`` between stanzas and none at the ends.

    Args:
        raw: Pasted text using any mix of ``\\r\\n``, ``\\r`` and ``\\n``.

    Returns:
        The surviving lines; ``[]`` for empty or all-noise input.
    """
    kept: list[str] = []
    for line in _LINE_BREAK_RE.split(raw):
        stripped = line.strip()
        if is_metadata_line(stripped) or is_chord_line(stripped):
            continue
        kept.append(stripped)
    return collapse_blank_lines(kept)
