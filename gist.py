"""GitHub gist access for publishing the playtime box."""

import logging

import requests

from errors import GistError

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"

HEADERS = {
    "Accept": "application/vnd.github+json",
    "User-Agent": "Mozilla/5.0 (compatible; SteamBox/1.0)",
}


class GistClient:
    """Fetch and edit gists with basic auth (username + token)."""

    def __init__(self, username: str, token: str,
                 session: requests.Session | None = None, timeout: int = 10):
        self.session = session or requests.Session()
        self.session.auth = (username.strip(), token.strip())
        self.timeout = timeout

    def _request(self, method: str, gist_id: str, **kwargs) -> dict:
        url = f"{GITHUB_API}/gists/{gist_id}"
        try:
            resp = self.session.request(method, url, headers=HEADERS,
                                        timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except requests.HTTPError as e:
            raise GistError(
                f"GitHub returned HTTP {e.response.status_code} for gist {gist_id}"
            ) from e
        except (requests.RequestException, ValueError) as e:
            raise GistError(f"Gist request failed for {gist_id}: {e}") from e

    def get_gist(self, gist_id: str) -> dict:
        return self._request("GET", gist_id)

    def update_gist(self, gist_id: str, gist: dict) -> dict:
        # Only the files mapping is editable content; send it back whole
        payload = {"files": gist.get("files", {})}
        if gist.get("description") is not None:
            payload["description"] = gist["description"]
        return self._request("PATCH", gist_id, json=payload)


def update_gist_content(client: GistClient, gist_id: str, filename: str,
                        lines: list[str]) -> None:
    """Replace one file's content in the gist with the joined lines."""
    gist = client.get_gist(gist_id)
    files = gist.setdefault("files", {})
    entry = files.get(filename) or {}
    entry["content"] = "\n".join(lines)
    files[filename] = entry
    client.update_gist(gist_id, gist)
    logger.info("  Updated Gist: %s", filename)
