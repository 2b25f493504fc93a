"""Environment settings for Steam Box."""

import enum
import logging
import os
from dataclasses import dataclass
from typing import Mapping

from errors import ConfigError

logger = logging.getLogger(__name__)


class OutputMode(enum.Enum):
    GIST = "GIST"
    MARKDOWN = "MARKDOWN"
    GIST_AND_MARKDOWN = "GIST_AND_MARKDOWN"

    @classmethod
    def parse(cls, value: str | None) -> "OutputMode":
        """Exact option names only; anything else (or unset) means gist only."""
        try:
            return cls(value or "")
        except ValueError:
            return cls.GIST

    @property
    def gist(self) -> bool:
        return self in (OutputMode.GIST, OutputMode.GIST_AND_MARKDOWN)

    @property
    def markdown(self) -> bool:
        return self in (OutputMode.MARKDOWN, OutputMode.GIST_AND_MARKDOWN)


def parse_app_ids(raw: str | None) -> tuple[int, ...]:
    """Comma-separated app ids; entries that aren't integers are skipped."""
    ids = []
    for part in (raw or "").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            logger.warning("Ignoring invalid app id: %r", part)
    return tuple(ids)


@dataclass(frozen=True)
class Settings:
    steam_api_key: str
    steam_id: int
    app_ids: tuple[int, ...] = ()
    gh_user: str = ""
    gh_token: str = ""
    gist_id: str = ""
    gist_id_recent: str = ""
    multi_line: bool = False
    output_mode: OutputMode = OutputMode.GIST
    markdown_file: str = ""

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env

        api_key = env.get("STEAM_API_KEY", "").strip()
        if not api_key:
            raise ConfigError("STEAM_API_KEY is not set")

        raw_id = env.get("STEAM_ID", "").strip()
        try:
            steam_id = int(raw_id)
        except ValueError:
            raise ConfigError(f"STEAM_ID must be a number, got {raw_id!r}") from None

        return cls(
            steam_api_key=api_key,
            steam_id=steam_id,
            app_ids=parse_app_ids(env.get("APP_ID")),
            gh_user=env.get("GH_USER", ""),
            gh_token=env.get("GH_TOKEN", ""),
            gist_id=env.get("GIST_ID", "").strip(),
            gist_id_recent=env.get("GIST_ID_RECENT", "").strip(),
            multi_line=env.get("MULTILINE", "") == "YES",
            output_mode=OutputMode.parse(env.get("GIST")),
            markdown_file=env.get("MARKDOWN_FILE", "").strip(),
        )
