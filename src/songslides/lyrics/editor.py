"""Editor text formatter.

Renders sections back to plain text with a ``[Label]`` line above each one,
the format :func:`~songslides.lyrics.structure.normalize_lyrics` reads
back losslessly::

    [Verse 1]
    Amazing grace how sweet the sound
    That saved a wretch like me

    [Chorus]
    ...

Usage::

    from songslides.lyrics.editor import auto_format_lyrics_for_editor
    text = auto_format_lyrics_for_editor(pasted)
"""

from ..models import Section
from .cleaner import clean_lines
from .inference import InferenceOptions
from .structure import normalize_structure


class EditorFormatter:
    """Render a list of :class:`~songslides.models.Section` to editor text."""

    def render(self, sections: list[Section]) -> str:
        """Return ``[Label]``-headed text for *sections*.

        Sections are separated by one blank line.  There is no trailing
        newline, and an empty list renders as ``""``.
        """
        return "\n\n".join(_render_section(section) for section in sections)


def _render_section(section: Section) -> str:
    return "\n".join([f"[{section.label}]", *section.lines])


def auto_format_lyrics_for_editor(raw: str, options: InferenceOptions | None = None) -> str:
    """Clean *raw*, detect or infer its sections and render them for review.

    Unlike :func:`~songslides.lyrics.structure.normalize_lyrics`, unbroken text
    goes through the repeated-sequence and chunking heuristics, since a person
    reviews the result before it is used.
    """
    sections = normalize_structure(clean_lines(raw), options or InferenceOptions())
    return EditorFormatter().render(sections)
