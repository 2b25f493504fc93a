"""Steam Box - Publish most played and recently played Steam games."""

import logging
import sys
import threading
import time
from typing import Callable

from config import Settings
from errors import ConfigError, DocumentError, FetchError, GistError
from gist import GistClient, update_gist_content
from playtime import playtime_lines, recent_lines
from readme_box import gist_title_link, update_markdown
from steam_api import SteamClient, fetch_with_backoff

logger = logging.getLogger(__name__)

ALL_TIME_TITLE = "⭐ My Most Played Steam Games"
RECENT_TITLE = "🔥 Recently Played Steam Games"


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------

def _fetch_all_time(settings: Settings, steam: SteamClient, **backoff) -> list[str]:
    games = fetch_with_backoff(
        lambda: steam.get_owned_games(settings.steam_id, settings.app_ids),
        label="owned games", **backoff,
    )
    return playtime_lines(games, settings.multi_line, settings.app_ids)


def _fetch_recent(settings: Settings, steam: SteamClient, **backoff) -> list[str]:
    games = fetch_with_backoff(
        lambda: steam.get_recent_games(settings.steam_id),
        label="recent games", **backoff,
    )
    return recent_lines(games, settings.multi_line)


def _publish(settings: Settings, gists: GistClient | None, gist_id: str,
             title: str, lines: list[str]) -> bool:
    """Push lines to every enabled target. A failed target doesn't stop the next."""
    ok = True
    mode = settings.output_mode

    if mode.gist:
        try:
            update_gist_content(gists, gist_id, title, lines)
        except GistError as e:
            logger.error("  Gist update failed for %s: %s", gist_id, e)
            ok = False

    if mode.markdown and settings.markdown_file:
        try:
            update_markdown(settings.markdown_file, gist_title_link(gist_id, title), lines)
            logger.info("  Updated markdown file: %s", settings.markdown_file)
        except DocumentError as e:
            logger.error("  Markdown update failed for %s: %s", settings.markdown_file, e)
            ok = False

    return ok


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def run(settings: Settings, steam: SteamClient | None = None,
        gists: GistClient | None = None,
        sleep: Callable[[float], None] = time.sleep,
        cancel_event: threading.Event | None = None) -> int:
    """Run both stats flows and return a process exit code."""
    steam = steam or SteamClient(settings.steam_api_key)
    if gists is None and settings.output_mode.gist:
        gists = GistClient(settings.gh_user, settings.gh_token)

    flows = [
        (settings.gist_id, ALL_TIME_TITLE, _fetch_all_time),
        (settings.gist_id_recent, RECENT_TITLE, _fetch_recent),
    ]

    exit_code = 0
    for gist_id, title, fetch in flows:
        if not gist_id:
            continue
        print(f"  {title}...")
        try:
            lines = fetch(settings, steam, sleep=sleep, cancel_event=cancel_event)
        except FetchError as e:
            logger.error("  Fetch failed for %s: %s", title, e)
            return 1
        print(f"           {len(lines)} lines")

        if not _publish(settings, gists, gist_id, title, lines):
            exit_code = 1

    return exit_code


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    print()
    print("  Steam Box - Updating playtime stats...")
    print()

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logger.error("  Configuration error: %s", e)
        sys.exit(2)

    if not settings.gist_id and not settings.gist_id_recent:
        print("  WARNING: Neither GIST_ID nor GIST_ID_RECENT is set, nothing to do.")

    code = run(settings)
    print()
    print("  Done!" if code == 0 else "  Finished with errors.")
    print()
    sys.exit(code)


if __name__ == "__main__":
    main()
