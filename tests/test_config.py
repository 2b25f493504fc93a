from __future__ import annotations

import pytest

from config import OutputMode, Settings, parse_app_ids
from errors import ConfigError

BASE_ENV = {"STEAM_API_KEY": "key", "STEAM_ID": "76561198000000000"}


def test_from_env_defaults() -> None:
    settings = Settings.from_env(BASE_ENV)
    assert settings.steam_id == 76561198000000000
    assert settings.app_ids == ()
    assert settings.multi_line is False
    assert settings.output_mode is OutputMode.GIST


def test_from_env_full() -> None:
    env = dict(BASE_ENV, APP_ID="70, 220,,abc,413150", GH_USER="me", GH_TOKEN="t",
               GIST_ID="g1", GIST_ID_RECENT="g2", MULTILINE="YES",
               GIST="GIST_AND_MARKDOWN", MARKDOWN_FILE="README.md")
    settings = Settings.from_env(env)
    assert settings.app_ids == (70, 220, 413150)
    assert settings.multi_line is True
    assert settings.output_mode is OutputMode.GIST_AND_MARKDOWN
    assert (settings.gist_id, settings.gist_id_recent) == ("g1", "g2")
    assert settings.markdown_file == "README.md"


@pytest.mark.parametrize("env", [
    {"STEAM_ID": "1"},
    {"STEAM_API_KEY": "key"},
    {"STEAM_API_KEY": "key", "STEAM_ID": "not-a-number"},
])
def test_from_env_rejects_bad_settings(env) -> None:
    with pytest.raises(ConfigError):
        Settings.from_env(env)


@pytest.mark.parametrize("raw, gist, markdown", [
    ("GIST", True, False),
    ("MARKDOWN", False, True),
    ("GIST_AND_MARKDOWN", True, True),
    ("", True, False),
    (None, True, False),
    ("bogus", True, False),
    ("markdown", True, False),
    (" GIST_AND_MARKDOWN ", True, False),
])
def test_output_mode(raw, gist, markdown) -> None:
    mode = OutputMode.parse(raw)
    assert (mode.gist, mode.markdown) == (gist, markdown)


def test_multiline_requires_exact_yes() -> None:
    assert Settings.from_env(dict(BASE_ENV, MULTILINE="yes")).multi_line is False


def test_parse_app_ids() -> None:
    assert parse_app_ids(None) == ()
    assert parse_app_ids("1,2") == (1, 2)
