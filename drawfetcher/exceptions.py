"""Exceptions raised by DrawFetcher."""

from typing import Optional


class DrawFetcherError(Exception):
    """Base exception for DrawFetcher errors."""


class FetchError(DrawFetcherError):
    """Document could not be fetched (timeout, transport error, non-2xx status)."""

    def __init__(
        self,
        url: str,
        message: str,
        status_code: Optional[int] = None,
        error_type: str = "transport",
    ):
        self.url = url
        self.status_code = status_code
        self.error_type = error_type  # "timeout", "transport" or "http_status"
        super().__init__(f"Failed to fetch {url}: {message}")


class UnknownStateError(DrawFetcherError, KeyError):
    """Requested state has no slot configuration."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(state)

    def __str__(self) -> str:
        return f"Unsupported state: {self.state}"


class ConfigError(DrawFetcherError):
    """Configuration file is missing or inconsistent."""
