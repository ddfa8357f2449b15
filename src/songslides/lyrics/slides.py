"""Sections → slide plan.

Each section is split on its internal blank lines, and each resulting
sub-group is cut into windows of ``lines_per_slide`` lines.  A lone last line
is rebalanced with the window before it, so 7 lines at 3 per slide become
``[3, 2, 2]`` rather than ``[3, 3, 1]``.
"""

import datetime

from ..models import NormalizedSong, Section, SlideContent
from ..settings import GenerateSettings
from .cleaner import split_stanzas


def chunk_lines(lines: list[str], max_lines: int, merge_orphans: bool = False) -> list[list[str]]:
    """Cut *lines* into windows of at most *max_lines*, avoiding a 1-line tail.

    With ``max_lines >= 3`` a 1-line tail takes the last line of the previous
    window when that window has more than 2 lines.  Two lines per slide leaves
    nothing to borrow; there ``merge_orphans`` folds the tail into the
    previous window instead, producing one 3-line slide.
    """
    chunks = [lines[i:i + max_lines] for i in range(0, len(lines), max_lines)]
    if len(chunks) < 2 or len(chunks[-1]) != 1:
        return chunks

    prev = chunks[-2]
    if max_lines >= 3 and len(prev) > 2:
        chunks[-1] = [prev.pop(), *chunks[-1]]
    elif max_lines == 2 and merge_orphans:
        prev.extend(chunks.pop())
    return chunks


def segment_section(
    section: Section,
    max_lines: int,
    include_labels: bool,
    merge_orphans: bool = False,
) -> list[SlideContent]:
    """Return the lyrics slides for one section.  Blank-only input gives ``[]``."""
    label = str(section.label) if include_labels else None
    return [
        SlideContent(kind="lyrics", section_label=label, lines=chunk)
        for group in split_stanzas(section.lines)
        for chunk in chunk_lines(group, max_lines, merge_orphans)
    ]


def format_date(day: datetime.date) -> str:
    """``2026-10-19`` → ``"October 19, 2026"``."""
    return f"{day:%B} {day.day}, {day.year}"


def split_into_slides(
    songs: list[NormalizedSong],
    settings: GenerateSettings,
    date: datetime.date | None = None,
) -> list[SlideContent]:
    """Build the full slide plan for a set of songs.

    The plan opens with one cover slide, then for each song a title slide
    followed by its lyrics slides.  Pass *date* for a reproducible cover;
    it defaults to today.
    """
    day = date or datetime.date.today()
    slides = [SlideContent(kind="cover", title=settings.cover_title, date=format_date(day))]

    for song in songs:
        slides.append(SlideContent(kind="title", title=song.title, artist=song.artist))
        for section in song.sections:
            slides.extend(
                segment_section(
                    section,
                    settings.lines_per_slide,
                    settings.show_section_labels,
                    settings.merge_orphans,
                )
            )
    return slides
