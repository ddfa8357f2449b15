import pytest

from songslides.exceptions import SettingsError
from songslides.settings import CONFIG_ENV_VAR, GenerateSettings, load_settings


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


# ---------------------------------------------------------------------------
# GenerateSettings
# ---------------------------------------------------------------------------


def test_defaults():
    settings = GenerateSettings()
    assert settings.lines_per_slide == 3
    assert settings.show_section_labels is False
    assert settings.theme == "dark"
    assert settings.background_image is None
    assert settings.cover_title == "Worship Set"
    assert settings.merge_orphans is False
    assert settings.infer_structure is False


def test_invalid_lines_per_slide():
    with pytest.raises(SettingsError):
        GenerateSettings(lines_per_slide=5)


def test_invalid_theme():
    with pytest.raises(SettingsError):
        GenerateSettings(theme="neon")


def test_invalid_bridge_strategy():
    with pytest.raises(SettingsError):
        GenerateSettings(bridge_strategy="guess")


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


def test_load_without_file_gives_defaults():
    assert load_settings() == GenerateSettings()


def test_load_from_file(tmp_path):
    path = tmp_path / "songslides.yaml"
    path.write_text("lines_per_slide: 2\ntheme: light\ncover_title: Sunday Morning\n")
    settings = load_settings(path)
    assert settings.lines_per_slide == 2
    assert settings.theme == "light"
    assert settings.cover_title == "Sunday Morning"


def test_load_from_env(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("show_section_labels: true\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert load_settings().show_section_labels is True


def test_overrides_win_over_file(tmp_path):
    path = tmp_path / "songslides.yaml"
    path.write_text("lines_per_slide: 2\ntheme: light\n")
    settings = load_settings(path, lines_per_slide=4, theme=None)
    assert settings.lines_per_slide == 4
    assert settings.theme == "light"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_settings(path) == GenerateSettings()


def test_missing_file(tmp_path):
    with pytest.raises(SettingsError, match="Could not read"):
        load_settings(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("theme: [dark\n")
    with pytest.raises(SettingsError, match="Invalid YAML"):
        load_settings(path)


def test_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(SettingsError, match="mapping"):
        load_settings(path)


def test_unknown_key(tmp_path):
    path = tmp_path / "unknown.yaml"
    path.write_text("font_size: 40\n")
    with pytest.raises(SettingsError, match="font_size"):
        load_settings(path)


def test_invalid_value_in_file(tmp_path):
    path = tmp_path / "bad-value.yaml"
    path.write_text("lines_per_slide: 7\n")
    with pytest.raises(SettingsError):
        load_settings(path)


def test_quoted_boolean_in_file_rejected(tmp_path):
    path = tmp_path / "quoted.yaml"
    path.write_text('show_section_labels: "no"\n')
    with pytest.raises(SettingsError, match="show_section_labels"):
        load_settings(path)


def test_yaml_boolean_words_accepted(tmp_path):
    path = tmp_path / "words.yaml"
    path.write_text("show_section_labels: yes\nmerge_orphans: off\n")
    settings = load_settings(path)
    assert settings.show_section_labels is True
    assert settings.merge_orphans is False


def test_non_bool_flag_rejected():
    with pytest.raises(SettingsError):
        GenerateSettings(infer_structure=1)
