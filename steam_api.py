"""Steam Web API access and the rate-limit-aware fetch wrapper."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

import requests
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from errors import FetchCancelledError, RateLimitedError, RetriesExhaustedError, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

API_BASE = "https://api.steampowered.com"

HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; SteamBox/1.0)",
}

MAX_ATTEMPTS = 5
BACKOFF_BASE = 2  # seconds; waits are 2, 4, 8, 16...
RECENT_GAMES_COUNT = 10


@dataclass(frozen=True)
class GameRecord:
    app_id: int
    name: str
    playtime_minutes: int
    playtime_2weeks: int = 0

    @classmethod
    def from_api(cls, item: dict) -> "GameRecord":
        return cls(
            app_id=int(item.get("appid", 0)),
            name=item.get("name") or "",
            playtime_minutes=int(item.get("playtime_forever", 0) or 0),
            playtime_2weeks=int(item.get("playtime_2weeks", 0) or 0),
        )


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

def _retry_after(resp: requests.Response) -> float | None:
    value = resp.headers.get("Retry-After")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _http_get(session: requests.Session, url: str, params: dict,
              timeout: int = 10) -> dict:
    """GET a Steam endpoint and decode JSON, classifying failures.

    HTTP 429 becomes RateLimitedError; everything else that goes wrong
    becomes UpstreamError.
    """
    try:
        resp = session.get(url, params=params, headers=HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise UpstreamError(f"Network error calling {url}: {e}") from e

    if resp.status_code == 429:
        raise RateLimitedError(retry_after=_retry_after(resp))

    try:
        resp.raise_for_status()
    except requests.HTTPError as e:
        raise UpstreamError(
            f"Steam returned HTTP {resp.status_code} for {url}",
            status_code=resp.status_code,
        ) from e

    try:
        return resp.json()
    except ValueError as e:
        raise UpstreamError(f"Steam returned invalid JSON for {url}") from e


# ---------------------------------------------------------------------------
# Steam Web API client
# ---------------------------------------------------------------------------

class SteamClient:
    """Thin wrapper over the IPlayerService endpoints."""

    def __init__(self, api_key: str, session: requests.Session | None = None,
                 timeout: int = 10):
        self.api_key = api_key.strip()
        self.session = session or requests.Session()
        self.timeout = timeout

    def _call(self, method: str, params: dict) -> list[GameRecord]:
        url = f"{API_BASE}/IPlayerService/{method}/v1/"
        query = {"key": self.api_key, "format": "json", **params}
        data = _http_get(self.session, url, query, timeout=self.timeout)
        if not isinstance(data, dict):
            raise UpstreamError(f"Unexpected payload from {method}")
        response = data.get("response") or {}
        games = (response.get("games") or []) if isinstance(response, dict) else None
        if not isinstance(games, list):
            raise UpstreamError(f"Unexpected games payload from {method}")
        logger.debug("%s returned %d games", method, len(games))
        try:
            return [GameRecord.from_api(g) for g in games]
        except (TypeError, ValueError, AttributeError) as e:
            raise UpstreamError(f"Malformed game entry from {method}: {e}") from e

    def get_owned_games(self, steam_id: int, app_ids: Iterable[int] = ()) -> list[GameRecord]:
        """Owned games with app info, optionally limited to the given app ids."""
        params = {
            "steamid": steam_id,
            "include_appinfo": 1,
            "include_played_free_games": 1,
        }
        for i, app_id in enumerate(app_ids):
            params[f"appids_filter[{i}]"] = app_id
        return self._call("GetOwnedGames", params)

    def get_recent_games(self, steam_id: int, count: int = RECENT_GAMES_COUNT) -> list[GameRecord]:
        """Recently played games, capped at *count*."""
        return self._call("GetRecentlyPlayedGames", {"steamid": steam_id, "count": count})


# ---------------------------------------------------------------------------
# Retry wrapper
# ---------------------------------------------------------------------------

def _interruptible_sleep(cancel_event: threading.Event) -> Callable[[float], None]:
    def _sleep(seconds: float) -> None:
        if cancel_event.wait(seconds):
            raise FetchCancelledError("Cancelled while waiting to retry")
    return _sleep


def _log_retry(label: str):
    def _before_sleep(retry_state) -> None:
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning("Received 429%s. Retrying in %ss... (attempt %d)",
                       f" on {label}" if label else "", f"{wait:g}",
                       retry_state.attempt_number)
    return _before_sleep


def fetch_with_backoff(
    fetch: Callable[[], T],
    *,
    attempts: int = MAX_ATTEMPTS,
    base: float = BACKOFF_BASE,
    sleep: Callable[[float], None] = time.sleep,
    cancel_event: threading.Event | None = None,
    label: str = "",
) -> T:
    """Call *fetch*, retrying with exponential backoff on rate limits only.

    The wait after failed attempt n (0-based) is ``base * 2**n``. Any error
    other than RateLimitedError propagates straight away. When every attempt
    is rate limited, RetriesExhaustedError wraps the last one. Setting
    *cancel_event* interrupts a pending wait with FetchCancelledError.
    """
    if cancel_event is not None:
        sleep = _interruptible_sleep(cancel_event)

    retrying = Retrying(
        retry=retry_if_exception_type(RateLimitedError),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base, exp_base=2, min=0),
        sleep=sleep,
        before_sleep=_log_retry(label),
    )
    try:
        return retrying(fetch)
    except RetryError as e:
        last = e.last_attempt.exception()
        raise RetriesExhaustedError(attempts, last) from last
