"""DrawFetcher - resilient extraction of daily draw results."""

from .exceptions import ConfigError, FetchError, UnknownStateError
from .fetcher import DocumentFetcher, DrawFetcher
from .models import DailyReport, ExtractionRequest, ExtractionResult, Game, Slot

__all__ = [
    "ConfigError",
    "DailyReport",
    "DocumentFetcher",
    "DrawFetcher",
    "ExtractionRequest",
    "ExtractionResult",
    "FetchError",
    "Game",
    "Slot",
    "UnknownStateError",
]
