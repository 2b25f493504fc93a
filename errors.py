"""
errors.py – Exception hierarchy for Steam Box.

All errors derive from SteamBoxError so callers can catch broadly or
specifically depending on context. Nothing in the library exits the process;
main() decides the exit code.
"""


class SteamBoxError(Exception):
    """Base class for all Steam Box exceptions."""


# ── Fetching ────────────────────────────────────────────────────────────────


class FetchError(SteamBoxError):
    """Raised when playtime data cannot be obtained from Steam."""


class RateLimitedError(FetchError):
    """
    Raised when Steam answers with HTTP 429 (too many requests).

    Attributes
    ----------
    retry_after : Seconds suggested by the Retry-After header, if any.
    """

    def __init__(self, message: str = "Steam API rate limit hit (HTTP 429)",
                 retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class UpstreamError(FetchError):
    """Raised for any non-retryable Steam failure (HTTP error, network, bad JSON)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RetriesExhaustedError(FetchError):
    """Raised when every attempt was rate limited."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Gave up after {attempts} attempts. Last error: {last_error}"
        )


class FetchCancelledError(FetchError):
    """Raised when a pending backoff wait is interrupted by the caller."""


# ── Output documents ────────────────────────────────────────────────────────


class DocumentError(SteamBoxError):
    """Raised when a local document cannot be patched."""


class MarkerNotFoundError(DocumentError):
    """Raised when a region marker is missing or appears more than once."""

    def __init__(self, marker: str, message: str | None = None) -> None:
        self.marker = marker
        super().__init__(message or f"Marker not found in document: {marker!r}")


class MarkerOrderError(MarkerNotFoundError):
    """Raised when the end marker comes before the start marker."""


class DocumentIOError(DocumentError):
    """Raised when the document cannot be read or written."""


class GistError(SteamBoxError):
    """Raised when a gist cannot be fetched or edited."""


class ConfigError(SteamBoxError):
    """Raised when required environment settings are missing or malformed."""
