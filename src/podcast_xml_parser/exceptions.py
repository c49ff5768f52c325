"""Custom exceptions for podcast_xml_parser.

Every failure the parser surfaces derives from ``PodcastXmlParserError`` so
callers can catch the whole family, except network-level failures, which are
raised by ``requests`` and propagated unchanged.

Exception Hierarchy:
    PodcastXmlParserError (base)
    ├── EmptyInputError - Literal XML input is empty or whitespace
    ├── FetchFailedError - Feed URL answered with a non-success status
    └── MalformedXmlError - Text cannot be parsed even after normalization

    TransportError - Alias of requests.RequestException (DNS, connection reset)
"""

from typing import Optional

import requests

from . import config_constants

TransportError = requests.RequestException


class PodcastXmlParserError(Exception):
    """Base exception for all parser errors.

    Attributes:
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
    """

    def __init__(self, message: str, suggestion: Optional[str] = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with the optional suggestion."""
        if self.suggestion:
            return f"{self.message} Suggestion: {self.suggestion}"
        return self.message


class EmptyInputError(PodcastXmlParserError):
    """Raised when literal XML input is empty or whitespace-only.

    Raised before any fetch or parse is attempted.
    """

    def __init__(self, message: str = config_constants.ERROR_EMPTY_INPUT) -> None:
        super().__init__(message=message)


class FetchFailedError(PodcastXmlParserError):
    """Raised when the feed server answers with a non-success HTTP status.

    The message is fixed. The status code and reason are logged by the
    downloader instead.

    Example:
        >>> try:
        ...     parse_url("https://example.com/missing.xml")
        ... except FetchFailedError:
        ...     logger.warning("Feed unavailable, keeping the cached copy")
    """

    def __init__(self, message: str = config_constants.ERROR_FETCH_FAILED) -> None:
        super().__init__(message=message)


class MalformedXmlError(PodcastXmlParserError):
    """Raised when the feed text cannot be parsed into a document.

    Undefined entities and a missing root element are repaired during
    normalization, so this only signals content the XML parser rejects
    outright (binary data, mismatched tags, forbidden DTD entities).

    Attributes:
        detail: Parser message describing the failure, if any
    """

    def __init__(
        self,
        detail: Optional[str] = None,
        message: str = config_constants.ERROR_MALFORMED_XML,
    ) -> None:
        self.detail = detail
        if detail:
            message = f"{message} ({detail})"
        super().__init__(
            message=message,
            suggestion="Check that the source is an RSS or Atom XML document",
        )
