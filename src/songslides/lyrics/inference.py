"""Section inference for lyrics that carry no explicit headers.

Two paths, tried in this order:

  1. Stanza path: the text has blank-line breaks.  The stanza that repeats
     most often is the chorus; stanzas after its last repeat are the bridge;
     everything else is numbered as verses.
  2. Single-stanza path: one unbroken block (typical of web pastes).  Look
     for a repeated run of lines, either an exact repeated sequence or a
     block grown around a frequently repeated "anchor" line.  The runs become
     choruses and the gaps between them become verses, one of which a bridge
     strategy may promote to ``Bridge``.  With no repetition at all, long
     blocks are cut into fixed-size verses.

Everything here is a best-effort heuristic.  The result is meant to be shown
to a person for correction, not trusted blindly.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Callable

from ..exceptions import SettingsError
from ..models import Section, SectionKind, SectionLabel
from .cleaner import split_stanzas

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w\s]|_")
_SPACE_RE = re.compile(r"\s+")

# Exact repeated sequences
_MIN_SEQUENCE_INPUT = 8
_MAX_SEQUENCE_LEN = 6
_MIN_SEQUENCE_LEN = 2

# Anchor-line fallback
_MAX_ANCHORS = 6
_ANCHOR_WINDOW = 14
_MAX_BLOCK_LINES = 8
_MIN_ANCHOR_CHARS = 8
_FILLER_LINES = frozenset({"oh", "yeah", "yes", "no", "amen"})

# Fixed-size verse chunks for long blocks with no repetition: (min lines, size)
_CHUNK_RULES = ((18, 8), (12, 6))

CHORUS = SectionLabel(SectionKind.CHORUS)
BRIDGE = SectionLabel(SectionKind.BRIDGE)


# ---------------------------------------------------------------------------
# Matching helpers
# ---------------------------------------------------------------------------


def normalize_for_match(line: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    text = _NON_WORD_RE.sub(" ", line.lower())
    return _SPACE_RE.sub(" ", text).strip()


def stanza_signature(stanza: list[str]) -> str:
    return "\n".join(n for n in map(normalize_for_match, stanza) if n)


def is_trivial_line(normalized: str) -> bool:
    """Return True for lines too short or generic to identify a chorus."""
    if len(normalized) < _MIN_ANCHOR_CHARS:
        return True
    if len(normalized.split()) <= 2:
        return True
    return normalized in _FILLER_LINES or normalized.startswith("yeah ")


def _merge_starts(starts: list[int], length: int) -> list[int]:
    """Drop starts that overlap the previously kept occurrence."""
    kept: list[int] = []
    for start in sorted(starts):
        if not kept or start - kept[-1] >= length:
            kept.append(start)
    return kept


# ---------------------------------------------------------------------------
# Bridge strategies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Segment:
    """A run of non-chorus lines between chorus occurrences."""

    lines: list[str]
    choruses_before: int
    is_tail: bool = False


BridgeStrategy = Callable[[list[Segment], int], int | None]


def bridge_after_second_chorus(segments: list[Segment], chorus_count: int) -> int | None:
    """Pick the segment following the second chorus.

    With three or more choruses the segment between choruses 2 and 3 wins,
    falling back to the longest segment anywhere after chorus 2.  With exactly
    two choruses the trailing segment is the bridge.
    """
    if chorus_count >= 3:
        for i, seg in enumerate(segments):
            if seg.choruses_before == 2 and not seg.is_tail:
                return i
        best, best_len = None, 0
        for i, seg in enumerate(segments):
            if seg.choruses_before >= 2 and len(seg.lines) > best_len:
                best, best_len = i, len(seg.lines)
        return best
    if chorus_count == 2:
        for i, seg in enumerate(segments):
            if seg.is_tail:
                return i
    return None


def bridge_trailing(segments: list[Segment], chorus_count: int) -> int | None:
    """The segment after the last chorus, once the chorus has repeated."""
    if chorus_count >= 2 and segments and segments[-1].is_tail:
        return len(segments) - 1
    return None


def bridge_none(segments: list[Segment], chorus_count: int) -> int | None:
    return None


BRIDGE_STRATEGIES: dict[str, BridgeStrategy] = {
    "post-second-chorus": bridge_after_second_chorus,
    "trailing": bridge_trailing,
    "none": bridge_none,
}

DEFAULT_BRIDGE_STRATEGY = "post-second-chorus"


@dataclass(frozen=True)
class InferenceOptions:
    """Knobs for :func:`infer_sections`.

    ``split_single_stanza`` enables the repeated-sequence, anchor and chunking
    heuristics for text with no blank lines.  When off, such text is a single
    ``Verse 1``.
    """

    split_single_stanza: bool = True
    bridge_strategy: str = DEFAULT_BRIDGE_STRATEGY

    def __post_init__(self):
        if self.bridge_strategy not in BRIDGE_STRATEGIES:
            names = ", ".join(sorted(BRIDGE_STRATEGIES))
            raise SettingsError(
                f"Unknown bridge strategy {self.bridge_strategy!r} (expected one of: {names})"
            )


# ---------------------------------------------------------------------------
# Stanza path
# ---------------------------------------------------------------------------


def find_chorus_signature(stanzas: list[list[str]]) -> str | None:
    """Return the signature of the most repeated stanza, or None.

    Ties go to the longer signature, then to the one seen first.
    """
    counts = Counter(sig for sig in map(stanza_signature, stanzas) if sig)
    best: str | None = None
    for sig, count in counts.items():
        if count < 2:
            continue
        if best is None or (count, len(sig)) > (counts[best], len(best)):
            best = sig
    return best


def _label_stanzas(stanzas: list[list[str]]) -> list[Section]:
    signature = find_chorus_signature(stanzas)
    chorus_flags = [signature is not None and stanza_signature(s) == signature for s in stanzas]
    chorus_positions = [i for i, flag in enumerate(chorus_flags) if flag]
    last_chorus = chorus_positions[-1] if len(chorus_positions) >= 2 else None

    logger.debug(
        "stanza inference: %d stanzas, chorus repeats %d times",
        len(stanzas),
        len(chorus_positions),
    )

    sections: list[Section] = []
    verse = 1
    for i, stanza in enumerate(stanzas):
        if chorus_flags[i]:
            label = CHORUS
        elif last_chorus is not None and i > last_chorus:
            label = BRIDGE
        else:
            label = SectionLabel.verse(verse)
            verse += 1
        sections.append(Section(label=label, lines=list(stanza)))
    return sections


# ---------------------------------------------------------------------------
# Single-stanza path
# ---------------------------------------------------------------------------


def find_repeated_sequence(normalized: list[str]) -> list[tuple[int, int]]:
    """Find the best exactly repeated run of 2-6 lines.

    Returns ``(start, length)`` spans for each non-overlapping occurrence, or
    ``[]`` when the input is shorter than 8 lines or nothing repeats.
    Candidates score ``length * occurrences``; ties go to the longer run.
    """
    n = len(normalized)
    if n < _MIN_SEQUENCE_INPUT:
        return []

    occurrences: dict[tuple[str, ...], list[int]] = {}
    for length in range(_MAX_SEQUENCE_LEN, _MIN_SEQUENCE_LEN - 1, -1):
        for i in range(n - length + 1):
            window = tuple(normalized[i:i + length])
            if all(window):
                occurrences.setdefault(window, []).append(i)

    best: tuple[int, int, list[int]] | None = None  # (score, length, starts)
    for window, starts in occurrences.items():
        starts = _merge_starts(starts, len(window))
        if len(starts) < 2:
            continue
        score = len(window) * len(starts)
        if best is None or (score, len(window)) > best[:2]:
            best = (score, len(window), starts)

    if best is None:
        return []
    _, length, starts = best
    return [(start, length) for start in starts]


def find_anchor_block(lines: list[str], normalized: list[str]) -> tuple[list[int], list[str]] | None:
    """Grow a chorus block around frequently repeated lines.

    Used when pasted choruses differ slightly between repeats, so no exact
    sequence matches.  Each anchor is a non-trivial line seen at least twice.
    The block keeps the lines of the anchor's first window that also appear in
    at least one other window.  Windows stop at the anchor's next occurrence.

    Returns ``(anchor_starts, block_lines)`` for the best-scoring anchor, or
    None.
    """
    freq = Counter(n for n in normalized if not is_trivial_line(n))
    ranked = sorted(
        ((line, count) for line, count in freq.items() if count >= 2),
        key=lambda item: (-item[1], -len(item[0])),
    )
    anchors = [line for line, _ in ranked[:_MAX_ANCHORS]]

    best: tuple[int, list[int], list[str]] | None = None  # (score, starts, block)
    for anchor in anchors:
        starts = [i for i, n in enumerate(normalized) if n == anchor]
        # Windows are up to 14 lines but end at the anchor's next occurrence,
        # unlike a fixed 14-line forward window that would overlap the next
        # repeat and count its lines twice.
        ends = [*starts[1:], len(normalized)]
        windows = [normalized[s:min(s + _ANCHOR_WINDOW, end)] for s, end in zip(starts, ends)]

        block_norm: list[str] = []
        for n in windows[0]:
            if is_trivial_line(n) or n in block_norm:
                continue
            if sum(1 for w in windows if n in w) >= 2:
                block_norm.append(n)
            if len(block_norm) >= _MAX_BLOCK_LINES:
                break
        if len(block_norm) < 2:
            continue

        # Original casing from the first occurrence of each line.
        block = [lines[normalized.index(n, starts[0])] for n in block_norm]

        score = len(block_norm) * len(starts)
        if best is None or score > best[0]:
            best = (score, starts, block)

    if best is None:
        return None
    _, starts, block = best
    return starts, block


def find_chorus_spans(lines: list[str]) -> list[tuple[int, int]]:
    """Return ``(start, length)`` chorus spans for a single stanza."""
    normalized = [normalize_for_match(line) for line in lines]

    spans = find_repeated_sequence(normalized)
    if spans:
        logger.debug("repeated sequence of %d lines found %d times", spans[0][1], len(spans))
        return spans

    anchored = find_anchor_block(lines, normalized)
    if anchored is None:
        return []
    starts, block = anchored
    starts = _merge_starts(starts, len(block))
    if len(starts) < 2:
        return []
    logger.debug("anchor block of %d lines found %d times", len(block), len(starts))
    return [(start, len(block)) for start in starts]


def _sections_from_spans(
    lines: list[str],
    spans: list[tuple[int, int]],
    strategy: BridgeStrategy,
) -> list[Section]:
    segments: list[Segment] = []
    # Source order: each entry is a segment index, or None for a chorus span.
    pieces: list[tuple[int | None, list[str]]] = []

    cursor = 0
    for i, (start, length) in enumerate(sorted(spans)):
        chunk = [line for line in lines[cursor:start] if line.strip()]
        if chunk:
            segments.append(Segment(lines=chunk, choruses_before=i))
            pieces.append((len(segments) - 1, chunk))
        pieces.append((None, lines[start:start + length]))
        cursor = start + length

    tail = [line for line in lines[cursor:] if line.strip()]
    if tail:
        segments.append(Segment(lines=tail, choruses_before=len(spans), is_tail=True))
        pieces.append((len(segments) - 1, tail))

    bridge = strategy(segments, len(spans))

    sections: list[Section] = []
    verse = 1
    for seg_index, chunk in pieces:
        if seg_index is None:
            label = CHORUS
        elif seg_index == bridge:
            label = BRIDGE
        else:
            label = SectionLabel.verse(verse)
            verse += 1
        sections.append(Section(label=label, lines=list(chunk)))
    return sections


def chunk_into_verses(lines: list[str], size: int) -> list[Section]:
    sections: list[Section] = []
    for i in range(0, len(lines), size):
        chunk = [line for line in lines[i:i + size] if line.strip()]
        if chunk:
            sections.append(Section(label=SectionLabel.verse(len(sections) + 1), lines=chunk))
    return sections


def _infer_single_stanza(lines: list[str], options: InferenceOptions) -> list[Section]:
    spans = find_chorus_spans(lines)
    if spans:
        return _sections_from_spans(lines, spans, BRIDGE_STRATEGIES[options.bridge_strategy])

    for min_lines, size in _CHUNK_RULES:
        if len(lines) >= min_lines:
            logger.debug("no repetition in %d lines; chunking by %d", len(lines), size)
            return chunk_into_verses(lines, size)
    return [Section(label=SectionLabel.verse(1), lines=list(lines))]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def infer_sections(lines: list[str], options: InferenceOptions | None = None) -> list[Section]:
    """Infer labelled sections for cleaned lines that contain no headers.

    Args:
        lines:   Output of :func:`~songslides.lyrics.cleaner.clean_lines`.
        options: Heuristic settings; defaults to :class:`InferenceOptions()`.

    Returns:
        Sections in source order.  Empty input gives ``[]``.
    """
    options = options or InferenceOptions()
    stanzas = split_stanzas(lines)
    if not stanzas:
        return []
    if len(stanzas) > 1:
        return _label_stanzas(stanzas)

    only = stanzas[0]
    if not options.split_single_stanza:
        return [Section(label=SectionLabel.verse(1), lines=list(only))]
    return _infer_single_stanza(only, options)
