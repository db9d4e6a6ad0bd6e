"""Error taxonomy for the analytics engine."""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for all engine errors."""


class InvalidArgument(AnalyticsError, ValueError):
    """Raised for a bad scope, day count or malformed input record."""


class DataUnavailable(AnalyticsError):
    """Raised when the event source fails or times out."""
