"""
Exception hierarchy for the LDS Buildings Map.

Every failure the top-level load routine reports to the user derives from
MapAppError. Malformed raw elements are not errors; the normalizer skips them.
"""

from typing import List, Optional, Any


class MapAppError(Exception):
    """Base class for application-level failures shown in the error banner."""
    pass


class FetchFailure(MapAppError):
    """
    Raised when every Overpass mirror was tried without success.

    Attributes:
        last_error: Message recorded for the final failed attempt
        attempts: EndpointAttempt records, in the order they were made
    """

    def __init__(self, last_error: Optional[str] = None, attempts: Optional[List[Any]] = None):
        self.last_error = last_error or "Overpass request failed"
        self.attempts = list(attempts or [])
        super().__init__(self.last_error)


class EmptyResultFailure(MapAppError):
    """Raised when a fetch succeeded but produced no buildings."""
    pass


class MapInitFailure(MapAppError):
    """Raised when the map backend cannot be created or fails to load."""
    pass
