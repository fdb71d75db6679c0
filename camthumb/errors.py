# camthumb/errors.py
"""
Exceptions raised by the thumbnail service.

NameResolutionError and ProductionError are the two request-path failures; the
Flask app maps them to 400 and 500 responses. LookupFileError is fatal at startup.
"""

from __future__ import annotations


class CamThumbError(Exception):
    """Base class for camthumb errors."""


class NameResolutionError(CamThumbError, LookupError):
    """The requested camera name has no entry in the lookup table."""

    def __init__(self, name: str, message: str = "invalid camera name") -> None:
        super().__init__(message)
        self.name = name


class ProductionError(CamThumbError):
    """A thumbnail could not be produced for a feed."""


class LookupFileError(CamThumbError):
    """The name -> URI lookup file is missing or malformed."""
