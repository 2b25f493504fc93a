from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
import requests

import main
from config import OutputMode, Settings
from errors import GistError, RateLimitedError, UpstreamError
from readme_box import END_MARKER, START_MARKER
from steam_api import GameRecord, SteamClient

GAMES = [
    GameRecord(2, "B", 125),
    GameRecord(1, "A", 500),
    GameRecord(3, "C", 0),
]


def _settings(**overrides) -> Settings:
    values = dict(steam_api_key="key", steam_id=42, gist_id="g-all",
                  gist_id_recent="g-recent")
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def steam():
    client = Mock()
    client.get_owned_games.return_value = GAMES
    client.get_recent_games.return_value = [GameRecord(9, "", 30)]
    return client


@pytest.fixture
def gists():
    return Mock()


@pytest.fixture
def readme(tmp_path):
    path = tmp_path / "README.md"
    path.write_text(f"intro\n{START_MARKER}\n{END_MARKER}\noutro\n", encoding="utf-8")
    return path


def test_run_updates_both_gists(steam, gists) -> None:
    with patch.object(main, "update_gist_content") as update:
        assert main.run(_settings(), steam=steam, gists=gists, sleep=Mock()) == 0

    (all_call, recent_call) = update.call_args_list
    assert all_call.args[1:3] == ("g-all", main.ALL_TIME_TITLE)
    lines = all_call.args[3]
    assert [line.split()[1] for line in lines] == ["A", "B", "C"]
    assert lines[0].endswith("⌚ 8 hrs 20 mins")
    assert lines[1].endswith("⏱️ 2 hrs 5 mins")
    assert lines[2].endswith("⌚ 0 hrs 0 mins")

    assert recent_call.args[1:3] == ("g-recent", main.RECENT_TITLE)
    assert recent_call.args[3][0].startswith("❓ Unknown Game")
    steam.get_owned_games.assert_called_once_with(42, ())
    steam.get_recent_games.assert_called_once_with(42)


def test_run_skips_flows_without_gist_id(steam, gists) -> None:
    with patch.object(main, "update_gist_content") as update:
        assert main.run(_settings(gist_id=""), steam=steam, gists=gists) == 0
    steam.get_owned_games.assert_not_called()
    assert update.call_count == 1


def test_run_markdown_only(steam, readme) -> None:
    settings = _settings(gist_id_recent="", output_mode=OutputMode.MARKDOWN,
                         markdown_file=str(readme), multi_line=True)
    with patch.object(main, "update_gist_content") as update:
        assert main.run(settings, steam=steam, gists=None) == 0
    update.assert_not_called()

    content = readme.read_text(encoding="utf-8")
    assert content.startswith("intro\n") and content.endswith("\noutro\n")
    assert 'href="https://gist.github.com/g-all"' in content
    assert "✨ A\n" in content


def test_run_retries_rate_limits(steam, gists) -> None:
    steam.get_owned_games.side_effect = [RateLimitedError(), RateLimitedError(), GAMES]
    sleep = Mock()
    with patch.object(main, "update_gist_content"):
        assert main.run(_settings(gist_id_recent=""), steam=steam, gists=gists, sleep=sleep) == 0
    assert [c.args[0] for c in sleep.call_args_list] == [2, 4]


def test_fetch_failure_aborts_run(steam, gists) -> None:
    steam.get_owned_games.side_effect = UpstreamError("down")
    with patch.object(main, "update_gist_content") as update:
        assert main.run(_settings(), steam=steam, gists=gists) == 1
    update.assert_not_called()
    steam.get_recent_games.assert_not_called()


def test_gist_failure_does_not_block_markdown(steam, gists, readme) -> None:
    settings = _settings(gist_id_recent="", output_mode=OutputMode.GIST_AND_MARKDOWN,
                         markdown_file=str(readme))
    with patch.object(main, "update_gist_content", side_effect=GistError("nope")):
        assert main.run(settings, steam=steam, gists=gists) == 1
    assert main.ALL_TIME_TITLE in readme.read_text(encoding="utf-8")


def test_markdown_failure_does_not_block_next_flow(steam, gists, tmp_path) -> None:
    settings = _settings(output_mode=OutputMode.GIST_AND_MARKDOWN,
                         markdown_file=str(tmp_path / "missing.md"))
    with patch.object(main, "update_gist_content") as update:
        assert main.run(settings, steam=steam, gists=gists) == 1
    assert update.call_count == 2


def test_main_exits_on_config_error(monkeypatch) -> None:
    monkeypatch.delenv("STEAM_API_KEY", raising=False)
    with pytest.raises(SystemExit) as exc_info:
        main.main()
    assert exc_info.value.code == 2


def test_undecodable_readme_does_not_block_gists(steam, gists, tmp_path) -> None:
    path = tmp_path / "README.md"
    path.write_bytes(f"caf\xe9\n{START_MARKER}\n{END_MARKER}\n".encode("latin-1"))
    settings = _settings(output_mode=OutputMode.GIST_AND_MARKDOWN, markdown_file=str(path))
    with patch.object(main, "update_gist_content") as update:
        assert main.run(settings, steam=steam, gists=gists) == 1
    assert update.call_count == 2


def test_malformed_steam_payload_fails_the_run(gists) -> None:
    resp = Mock(status_code=200)
    resp.json.return_value = {"response": {"games": [{"appid": None, "name": "x"}]}}
    session = Mock(spec=requests.Session)
    session.get.return_value = resp
    steam = SteamClient("key", session=session)
    with patch.object(main, "update_gist_content") as update:
        assert main.run(_settings(), steam=steam, gists=gists) == 1
    update.assert_not_called()
