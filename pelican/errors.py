"""Exceptions raised by the Pelican client."""

from __future__ import annotations


class PelicanError(Exception):
    """Base exception for Pelican failures."""


class TransportError(PelicanError):
    """The Pelican API could not be reached or answered with an HTTP error."""


class VendorError(PelicanError):
    """The Pelican API answered but reported ``success=0``."""

    def __init__(self, message: str | None, *, context: str | None = None) -> None:
        """Store the vendor supplied message."""

        self.message = message or ""
        text = self.message or "no message"
        if context:
            text = f"{context}: {text}"
        super().__init__(text)


class MalformedResponseError(PelicanError):
    """The payload decoded but violates an expected invariant."""


class InvalidParameterError(PelicanError, ValueError):
    """A caller supplied value is outside the accepted domain."""


__all__ = [
    "InvalidParameterError",
    "MalformedResponseError",
    "PelicanError",
    "TransportError",
    "VendorError",
]
