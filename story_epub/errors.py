"""Errors that abort a conversion run.

Every error here is fatal for the run; the message is meant to be shown to
the user as-is.
"""

from typing import Optional


class ConversionError(Exception):
    """Base class for all conversion failures."""


class InvalidInput(ConversionError):
    """Empty URL or a URL outside the supported site."""


class NoChaptersFound(ConversionError):
    def __init__(self, url: str):
        self.url = url
        super().__init__("No chapters found")


class RetrievalExhausted(ConversionError):
    """Every fetch attempt failed, across all proxies tried."""

    def __init__(self, url: str, attempts: int, last_error: Optional[BaseException]):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        detail = str(last_error) if last_error else "unknown error"
        super().__init__(f"Failed to fetch after {attempts} attempts: {detail}")


class ContentNotFound(ConversionError):
    """No selector in the fallback chain matched a chapter page."""

    def __init__(self, position: int, total: int, url: str):
        self.position = position
        self.total = total
        self.url = url
        super().__init__(
            f"Could not find story content for chapter {position}/{total} ({url})"
        )
