"""
Error taxonomy for the E-Hentai client.

Every failure raised by the core derives from ``EhError`` so callers can
catch the whole family at once.  Nothing in this package retries; errors
surface to the immediate caller with any partial progress left intact.
"""

from typing import Optional


class EhError(Exception):
    """Base class for all client errors."""


class TransportError(EhError):
    """Network, DNS or TLS failure, or a non-2xx response."""

    def __init__(self, message: str, url: str = '', status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(EhError):
    """A document is missing a field the site layout is expected to carry."""


class ImageIndexError(EhError, IndexError):
    """An image index outside the loaded image list was requested."""

    def __init__(self, index: int, length: int):
        super().__init__(f'image index {index} out of range (loaded: {length})')
        self.index = index
        self.length = length


class UriError(EhError, ValueError):
    """A locator or query could not be turned into a valid URL."""
