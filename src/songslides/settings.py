"""Generation settings and config file loading.

Settings resolve in three layers, later ones winning:

  1. the dataclass defaults below,
  2. a YAML file (``path`` argument, else ``$SONGSLIDES_CONFIG``),
  3. explicit keyword overrides (CLI options); ``None`` values are ignored.

Example config::

    lines_per_slide: 2
    show_section_labels: true
    theme: light
    cover_title: Sunday Morning
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from .exceptions import SettingsError
from .lyrics.inference import BRIDGE_STRATEGIES, DEFAULT_BRIDGE_STRATEGY

CONFIG_ENV_VAR = "SONGSLIDES_CONFIG"

LINES_PER_SLIDE_CHOICES = (2, 3, 4)
THEME_CHOICES = ("dark", "light")

_BOOL_FIELDS = ("show_section_labels", "merge_orphans", "infer_structure")


@dataclass(frozen=True)
class GenerateSettings:
    """How songs are split into slides and rendered."""

    lines_per_slide: int = 3
    show_section_labels: bool = False
    theme: str = "dark"
    background_image: str | None = None  # image file shown behind lyrics slides
    cover_title: str = "Worship Set"
    merge_orphans: bool = False  # with 2 lines per slide, fold a 1-line tail into the previous slide
    infer_structure: bool = False  # run chorus inference on lyrics without blank lines
    bridge_strategy: str = DEFAULT_BRIDGE_STRATEGY

    def __post_init__(self):
        if self.lines_per_slide not in LINES_PER_SLIDE_CHOICES:
            raise SettingsError(
                f"lines_per_slide must be one of {LINES_PER_SLIDE_CHOICES}, got {self.lines_per_slide!r}"
            )
        if self.theme not in THEME_CHOICES:
            raise SettingsError(f"theme must be one of {THEME_CHOICES}, got {self.theme!r}")
        if self.bridge_strategy not in BRIDGE_STRATEGIES:
            raise SettingsError(f"Unknown bridge strategy {self.bridge_strategy!r}")
        # YAML strings such as "no" are truthy, so only real booleans pass.
        for name in _BOOL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise SettingsError(f"{name} must be true or false, got {value!r}")


def _read_config(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise SettingsError(f"Could not read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SettingsError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(GenerateSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise SettingsError(f"Unknown setting(s) in {path}: {', '.join(unknown)}")
    return data


def load_settings(path: str | Path | None = None, **overrides) -> GenerateSettings:
    """Build :class:`GenerateSettings` from defaults, a YAML file and overrides.

    Raises :class:`~songslides.exceptions.SettingsError` for unreadable files,
    unknown keys or invalid values.
    """
    settings = GenerateSettings()
    config_path = path or os.getenv(CONFIG_ENV_VAR)
    if config_path:
        settings = replace(settings, **_read_config(Path(config_path)))

    given = {k: v for k, v in overrides.items() if v is not None}
    return replace(settings, **given) if given else settings
