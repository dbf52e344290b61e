"""
City center lookup for the LDS Buildings Map.

Turns a "city, state" search into a (latitude, longitude) search center
using the OSMnx geocoder (Nominatim).
"""

import logging
from typing import Optional, Tuple

import osmnx as ox

from config import Config
from utils.validation import validate_coordinates

logger = logging.getLogger(__name__)

# Configure osmnx settings
ox.settings.log_console = False
ox.settings.use_cache = True


def validate_inputs(city: str, state: str, country: str) -> bool:
    """
    Check that every part of a city search is filled in.

    Args:
        city: City name
        state: State name
        country: Country name

    Returns:
        True if valid, False otherwise
    """
    for label, value in (("City", city), ("State", state), ("Country", country)):
        if not value or not value.strip():
            logger.error(f"{label} name cannot be empty")
            return False
    return True


def build_query_string(city: str, state: str, country: str) -> str:
    """
    Build the geocoder query, e.g. "Independence, Missouri, USA".

    Args:
        city: City name
        state: State name
        country: Country name

    Returns:
        Formatted query string
    """
    return ", ".join(part.strip() for part in (city, state, country))


def fetch_city_center(
    city: str,
    state: str,
    country: str = Config.DEFAULT_COUNTRY
) -> Optional[Tuple[float, float]]:
    """
    Geocode a city to a (latitude, longitude) search center.

    Args:
        city: City name (e.g., "Independence")
        state: State name (e.g., "Missouri")
        country: Country name (default: "USA")

    Returns:
        (latitude, longitude) tuple or None if not found
    """
    if not validate_inputs(city, state, country):
        return None

    query = build_query_string(city, state, country)
    logger.info(f"Geocoding city center for: {query}")

    try:
        lat, lon = ox.geocode(query)
    except Exception as e:
        # osmnx raises InsufficientResponseError for unknown places
        logger.error(f"Error geocoding {query}: {e}")
        return None

    center = (float(lat), float(lon))
    if not validate_coordinates(*center):
        logger.error(f"Geocoder returned an invalid point for {query}: {center}")
        return None

    logger.info(f"Found center for {query}: {center}")
    return center


US_STATES = [
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
    "Connecticut", "Delaware", "Florida", "Georgia", "Hawaii", "Idaho",
    "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky", "Louisiana",
    "Maine", "Maryland", "Massachusetts", "Michigan", "Minnesota",
    "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada",
    "New Hampshire", "New Jersey", "New Mexico", "New York",
    "North Carolina", "North Dakota", "Ohio", "Oklahoma", "Oregon",
    "Pennsylvania", "Rhode Island", "South Carolina", "South Dakota",
    "Tennessee", "Texas", "Utah", "Vermont", "Virginia", "Washington",
    "West Virginia", "Wisconsin", "Wyoming"
]
