"""Photo domain exceptions."""

from fastapi import status

from src.core.domain.exceptions import ConfigurationError, DomainException


class FeedFetchError(DomainException):
    """Raised when a feed cannot be retrieved over HTTP."""

    http_status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "FEED_FETCH_ERROR"

    def __init__(self, feed_id: str, reason: str):
        self.feed_id = feed_id
        super().__init__(f"Could not access feed at '{feed_id}': {reason}")


class FeedDecodeError(DomainException):
    """Raised when feed bytes are not a readable RSS 2.0 or Atom document."""

    http_status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    error_code = "FEED_DECODE_ERROR"


class FeedListError(ConfigurationError):
    """Raised when the configured feed list cannot be read."""

    error_code = "FEED_LIST_ERROR"

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cannot read list of RSS feeds at '{path}': {reason}")
