import json
import re
import sys
from pathlib import Path

import click

from .deck import build_deck
from .exceptions import FetchError, ParseError, SettingsError
from .log import configure_logging
from .lyrics.bulk import parse_bulk_lyrics
from .lyrics.editor import auto_format_lyrics_for_editor
from .lyrics.inference import BRIDGE_STRATEGIES, DEFAULT_BRIDGE_STRATEGY, InferenceOptions
from .lyrics.slides import split_into_slides
from .lyrics.structure import normalize_lyrics
from .models import NormalizedSong, SlideContent
from .providers.musicbrainz import MusicBrainzSearch
from .providers.webpage import WebPageLyricsFetcher
from .settings import GenerateSettings, load_settings

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _title_from_name(name: str) -> str:
    """Derive a song title from a file name: ``firm-foundation.txt`` → ``Firm Foundation``."""
    if name in ("-", "<stdin>"):
        return "Untitled"
    stem = Path(name).stem
    return re.sub(r"[-_\s]+", " ", stem).strip().title() or "Untitled"


def _fetch_error_message(exc: FetchError) -> str:
    msg = f"Could not fetch {exc.url}"
    if exc.status_code:
        msg += f" (HTTP {exc.status_code})"
    if exc.status_code == 403:
        msg += " — the site blocks automated requests; paste the lyrics instead"
    return msg


def _song_to_dict(song: NormalizedSong) -> dict:
    return {
        "title": song.title,
        "artist": song.artist,
        "sections": [
            {"label": str(section.label), "lines": section.lines}
            for section in song.sections
        ],
    }


def _load_songs(sources, bulk: bool, settings: GenerateSettings) -> list[NormalizedSong]:
    options = None
    if settings.infer_structure:
        options = InferenceOptions(split_single_stanza=True, bridge_strategy=settings.bridge_strategy)

    songs: list[NormalizedSong] = []
    for source in sources:
        text = source.read()
        if bulk:
            for block in parse_bulk_lyrics(text):
                songs.append(normalize_lyrics(block.title, block.lyrics, options=options))
        else:
            songs.append(normalize_lyrics(_title_from_name(source.name), text, options=options))
    return songs


def _describe_slide(slide: SlideContent) -> list[str]:
    if slide.kind == "cover":
        return [f"=== {slide.title} ({slide.date})"]
    if slide.kind == "title":
        byline = f" / {slide.artist}" if slide.artist else ""
        return ["", f"## {slide.title}{byline}"]
    header = f"--- [{slide.section_label}]" if slide.section_label else "---"
    return [header, *slide.lines]


# Options shared by the "slides" and "build" commands.
_settings_options = [
    click.option("--config", "config_path", default=None, metavar="PATH",
                 help="YAML settings file (default: $SONGSLIDES_CONFIG)."),
    click.option("-n", "--lines-per-slide", type=click.Choice(["2", "3", "4"]), default=None,
                 help="Maximum lyric lines per slide."),
    click.option("--labels/--no-labels", "show_section_labels", default=None,
                 help="Show section labels on lyrics slides."),
    click.option("--infer/--no-infer", "infer_structure", default=None,
                 help="Also infer choruses in lyrics without blank lines."),
    click.option("--bulk", is_flag=True, default=False,
                 help="Each file holds several songs separated by '# Title' markers."),
]


def settings_options(func):
    for option in reversed(_settings_options):
        func = option(func)
    return func


def _resolve_settings(config_path, lines_per_slide, **overrides) -> GenerateSettings:
    try:
        return load_settings(
            config_path,
            lines_per_slide=int(lines_per_slide) if lines_per_slide else None,
            **overrides,
        )
    except SettingsError as exc:
        _fail(str(exc))


@click.group()
@click.option("--log-level", type=click.Choice(_LOG_LEVELS, case_sensitive=False),
              default="WARNING", show_default=True, help="Logging verbosity.")
def main(log_level: str) -> None:
    """Turn pasted song lyrics into structured sections and slide decks."""
    configure_logging(log_level)


@main.command("format")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--bridge-strategy", type=click.Choice(sorted(BRIDGE_STRATEGIES)),
              default=DEFAULT_BRIDGE_STRATEGY, show_default=True,
              help="How to pick the bridge in lyrics without blank lines.")
def format_command(source, bridge_strategy: str) -> None:
    """Auto-format pasted lyrics with [Section] headers for review.

    Reads SOURCE (default: stdin) and prints the formatted text.
    """
    options = InferenceOptions(bridge_strategy=bridge_strategy)
    click.echo(auto_format_lyrics_for_editor(source.read(), options))


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--title", default=None, help="Song title (default: from the file name).")
@click.option("--artist", default=None, help="Song artist.")
def normalize(source, title: str | None, artist: str | None) -> None:
    """Print the normalized structure of SOURCE as JSON."""
    song = normalize_lyrics(title or _title_from_name(source.name), source.read(), artist)
    click.echo(json.dumps(_song_to_dict(song), ensure_ascii=False, indent=2))


@main.command()
@click.argument("sources", nargs=-1, required=True, type=click.File("r", encoding="utf-8"))
@settings_options
def slides(sources, config_path, lines_per_slide, show_section_labels, infer_structure, bulk) -> None:
    """Print the slide plan for one or more lyric files."""
    settings = _resolve_settings(
        config_path,
        lines_per_slide,
        show_section_labels=show_section_labels,
        infer_structure=infer_structure,
    )
    plan = split_into_slides(_load_songs(sources, bulk, settings), settings)
    for slide in plan:
        for line in _describe_slide(slide):
            click.echo(line)


@main.command()
@click.argument("sources", nargs=-1, required=True, type=click.File("r", encoding="utf-8"))
@click.option("-o", "--output", "output_path", default="worship-set.pptx", show_default=True,
              metavar="PATH", help="Output .pptx path.")
@click.option("--theme", type=click.Choice(["dark", "light"]), default=None, help="Colour theme.")
@click.option("--background", "background_image", default=None, metavar="IMAGE",
              help="Background image for lyrics slides.")
@click.option("--cover-title", default=None, help="Title on the cover slide.")
@settings_options
def build(sources, output_path, theme, background_image, cover_title, config_path,
          lines_per_slide, show_section_labels, infer_structure, bulk) -> None:
    """Build a .pptx slide deck from one or more lyric files."""
    settings = _resolve_settings(
        config_path,
        lines_per_slide,
        show_section_labels=show_section_labels,
        infer_structure=infer_structure,
        theme=theme,
        background_image=background_image,
        cover_title=cover_title,
    )
    songs = _load_songs(sources, bulk, settings)
    if not songs:
        _fail("No songs found in input")

    try:
        data = build_deck(split_into_slides(songs, settings), settings)
    except SettingsError as exc:
        _fail(str(exc))

    dest = Path(output_path)
    dest.write_bytes(data)
    click.echo(f"Written {len(songs)} song(s) to {dest}")


@main.command()
@click.argument("query")
@click.option("--limit", default=10, show_default=True, help="Maximum number of results.")
def search(query: str, limit: int) -> None:
    """Search MusicBrainz for songs matching QUERY."""
    try:
        candidates = MusicBrainzSearch(limit=limit).search(query)
    except FetchError as exc:
        _fail(_fetch_error_message(exc))
    except ParseError as exc:
        _fail(str(exc))

    if not candidates:
        click.echo("No matches.")
        return
    for c in candidates:
        artist = f" — {c.artist}" if c.artist else ""
        click.echo(f"{c.score:.2f}  {c.title}{artist}  [{c.id}]")


@main.command()
@click.argument("url")
@click.option("--raw", is_flag=True, default=False,
              help="Print the page text as found instead of auto-formatting it.")
def fetch(url: str, raw: bool) -> None:
    """Fetch lyrics from a web page and auto-format them."""
    if not WebPageLyricsFetcher.can_handle(url):
        _fail(f"Unsupported URL: {url}")

    try:
        lyrics = WebPageLyricsFetcher().scrape(url)
    except FetchError as exc:
        _fail(_fetch_error_message(exc))
    except ParseError as exc:
        _fail(str(exc))

    click.echo(f"# {lyrics.title}")
    click.echo(lyrics.raw if raw else auto_format_lyrics_for_editor(lyrics.raw))
