"""Error types raised by the feed import pipeline."""

from typing import Optional


class CatalogImportError(Exception):
    """Base class for all import errors"""


class ConfigurationError(CatalogImportError):
    """Required store configuration is missing."""


class FeedParseError(CatalogImportError):
    """The feed document is not well-formed XML, even after sanitization.

    The message is the first diagnostic line reported by the XML parser.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class RecordError(CatalogImportError):
    """A single category or product could not be imported.

    Raised per record; the coordinator logs it and moves on to the next one.
    """

    def __init__(self, entity: str, external_id: Optional[str], message: str):
        super().__init__(f"{entity} {external_id}: {message}")
        self.entity = entity
        self.external_id = external_id
        self.reason = message
