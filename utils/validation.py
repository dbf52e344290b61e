"""
Input validation utilities for the LDS Buildings Map.

Checks the search center, radius and filter chosen in the sidebar, and
the free-text city search.
"""

import re
from typing import Any

from config import Config

# Letters, spaces, hyphens and periods; cities may also use apostrophes
# ("St. Louis", "O'Fallon", "Winston-Salem")
CITY_PATTERN = re.compile(r"^[a-zA-Z\s\-'.]+$")
STATE_PATTERN = re.compile(r"^[a-zA-Z\s\-.]+$")

FILTER_NAMES = ('all', 'temple', 'meetinghouse')


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_coordinates(lat: Any, lon: Any) -> bool:
    """
    Validate that latitude and longitude are valid coordinates.

    Args:
        lat: Latitude
        lon: Longitude

    Returns:
        True if valid, False otherwise
    """
    if not (_is_number(lat) and _is_number(lon)):
        return False

    return -90 <= lat <= 90 and -180 <= lon <= 180


def validate_radius_km(radius_km: Any) -> bool:
    """
    Validate a search radius entered in kilometers.

    Args:
        radius_km: Radius in kilometers

    Returns:
        True if within the configured range, False otherwise
    """
    if not _is_number(radius_km):
        return False

    return Config.MIN_SEARCH_RADIUS_KM <= radius_km <= Config.MAX_SEARCH_RADIUS_KM


def validate_filter_type(filter_type: Any) -> bool:
    """True for 'all', 'temple' or 'meetinghouse'."""
    return isinstance(filter_type, str) and filter_type in FILTER_NAMES


def _validate_place_name(name: Any, max_length: int, pattern: re.Pattern) -> bool:
    if not isinstance(name, str):
        return False

    name = name.strip()
    if not 2 <= len(name) <= max_length:
        return False

    return bool(pattern.match(name)) and any(c.isalpha() for c in name)


def validate_city_name(city: str) -> bool:
    """
    Validate a city name typed into the city search.

    Args:
        city: City name to validate

    Returns:
        True if valid, False otherwise
    """
    return _validate_place_name(city, 100, CITY_PATTERN)


def validate_state_name(state: str) -> bool:
    """
    Validate a state name from the city search.

    Args:
        state: State name to validate

    Returns:
        True if valid, False otherwise
    """
    return _validate_place_name(state, 50, STATE_PATTERN)


def sanitize_input(text: str) -> str:
    """
    Collapse whitespace and title-case free text ("salt  lake city" -> "Salt Lake City").

    Args:
        text: Input text to sanitize

    Returns:
        Sanitized text, or an empty string for non-text input
    """
    if not isinstance(text, str):
        return ""

    return " ".join(text.split()).title()
