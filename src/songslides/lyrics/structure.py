"""Clean lines → ordered, labelled sections.

Text with explicit headers is split at the headers as written.  Text without
any header is handed to :mod:`songslides.lyrics.inference`.
"""

import logging

from ..models import NormalizedSong, Section, SectionLabel
from .cleaner import clean_lines, collapse_blank_lines
from .headers import has_headers, parse_header
from .inference import InferenceOptions, infer_sections

logger = logging.getLogger(__name__)

# normalize_lyrics feeds the deck directly, so unbroken text stays one verse
# there; the single-stanza heuristics only run in the reviewable editor path.
NORMALIZE_OPTIONS = InferenceOptions(split_single_stanza=False)


def _close_section(label: SectionLabel, buf: list[str]) -> Section | None:
    lines = collapse_blank_lines(buf)
    if not lines:
        return None
    return Section(label=label, lines=lines)


def split_at_headers(lines: list[str]) -> list[Section]:
    """Group *lines* into sections at each header line.

    Lines before the first header become a leading ``Verse 1``.  Sections left
    with no content after blank-line cleanup are dropped.  Explicit verse
    numbers are kept exactly as written, gaps and repeats included.
    """
    sections: list[Section] = []
    label: SectionLabel | None = None
    prelude: list[str] = []
    buf: list[str] = []

    for line in lines:
        parsed = parse_header(line)
        if parsed is not None:
            if label is not None:
                section = _close_section(label, buf)
                if section:
                    sections.append(section)
            label = parsed
            buf = []
            continue

        if label is None:
            prelude.append(line)
        else:
            buf.append(line)

    if label is not None:
        section = _close_section(label, buf)
        if section:
            sections.append(section)

    leading = _close_section(SectionLabel.verse(1), prelude)
    if leading:
        sections.insert(0, leading)
    return sections


def normalize_structure(lines: list[str], options: InferenceOptions | None = None) -> list[Section]:
    """Return ordered sections for cleaned *lines*, with or without headers."""
    if has_headers(lines):
        return split_at_headers(lines)
    logger.debug("no section headers in %d lines; inferring structure", len(lines))
    return infer_sections(lines, options)


def normalize_lyrics(
    title: str,
    raw: str,
    artist: str | None = None,
    options: InferenceOptions | None = None,
) -> NormalizedSong:
    """Clean and structure a raw lyrics paste.

    Never raises: empty input yields a song with no sections, and unbroken
    text without headers yields a single ``Verse 1``.
    """
    sections = normalize_structure(clean_lines(raw), options or NORMALIZE_OPTIONS)
    return NormalizedSong(title=title, artist=artist, sections=sections)
