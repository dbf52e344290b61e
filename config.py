"""
Configuration settings for the LDS Buildings Map application.

Loads environment variables and provides centralized configuration
for Overpass queries, map display, and application settings.
"""

import os
from typing import Dict, List, Tuple, Any
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _split_endpoints(value: str) -> List[str]:
    """Split a comma-separated endpoint list, dropping blanks and duplicates."""
    endpoints: List[str] = []
    for endpoint in value.split(','):
        endpoint = endpoint.strip()
        if endpoint and endpoint not in endpoints:
            endpoints.append(endpoint)
    return endpoints


class Config:
    """Application configuration settings."""

    # ============================================================================
    # APPLICATION SETTINGS
    # ============================================================================
    APP_TITLE = "LDS Church Buildings Map"
    APP_ICON = "⛪"
    APP_DESCRIPTION = "Temples and meetinghouses of The Church of Jesus Christ of Latter-day Saints"

    # ============================================================================
    # SEARCH SETTINGS
    # ============================================================================
    # Default center: Kansas City, Missouri
    DEFAULT_CENTER_LAT = float(os.getenv('LDS_MAP_CENTER_LAT', '39.0997'))
    DEFAULT_CENTER_LON = float(os.getenv('LDS_MAP_CENTER_LON', '-94.5786'))

    # Search radius in meters (100 km is roughly 62 miles)
    DEFAULT_SEARCH_RADIUS_M = int(os.getenv('LDS_MAP_SEARCH_RADIUS_M', '100000'))
    MIN_SEARCH_RADIUS_KM = 5
    MAX_SEARCH_RADIUS_KM = 500

    # ============================================================================
    # OVERPASS SETTINGS
    # ============================================================================
    OVERPASS_ENDPOINTS = _split_endpoints(os.getenv(
        'OVERPASS_ENDPOINTS',
        "https://overpass-api.de/api/interpreter,"
        "https://overpass.kumi.systems/api/interpreter,"
        "https://lz4.overpass-api.de/api/interpreter"
    ))

    # Server-side query timeout (seconds), embedded in the query itself
    OVERPASS_QUERY_TIMEOUT = 60

    # Client-side HTTP timeout (seconds)
    OVERPASS_TIMEOUT = float(os.getenv('OVERPASS_TIMEOUT', '90'))

    # Backoff after a 429 before moving to the next mirror (seconds)
    RATE_LIMIT_BACKOFF_BASE = 1.2
    RATE_LIMIT_BACKOFF_JITTER = 0.4

    USER_AGENT = "lds-buildings-map/1.0 (+https://www.openstreetmap.org/)"

    # ============================================================================
    # BUILDING DEFAULTS
    # ============================================================================
    DEFAULT_BUILDING_NAME = "LDS Building"
    DEFAULT_DENOMINATION = "mormon"
    DEFAULT_RELIGION = "christian"
    ADDRESS_NOT_AVAILABLE = "Address not available"

    # Coordinate precision used for duplicate detection (~1.1 m)
    DEDUP_PRECISION = 5

    # ============================================================================
    # MAP SETTINGS
    # ============================================================================
    DEFAULT_MAP_ZOOM = 8

    # Map tile provider
    MAP_TILES = "CartoDB positron"
    MAP_HEIGHT = 600

    # Zoom used by zoom-to-fit when the spread is below every threshold
    FIT_DEFAULT_ZOOM = 10

    # (minimum spread in degrees, zoom) pairs, widest first
    ZOOM_STEPS: List[Tuple[float, int]] = [
        (10.0, 4),
        (5.0, 5),
        (2.0, 6),
        (1.0, 7),
        (0.5, 8),
        (0.1, 10),
    ]

    # Marker styles by building subtype
    MARKER_STYLES: Dict[str, Dict[str, Any]] = {
        'temple': {
            'shape': 'diamond',
            'color': '#FFD700',        # Gold
            'size': 16,
            'label': 'Temple',
            'icon': '🏛️',
        },
        'meetinghouse': {
            'shape': 'circle',
            'color': '#4169E1',        # Royal blue
            'size': 12,
            'label': 'Meetinghouse',
            'icon': '⛪',
        },
    }
    MARKER_OUTLINE_COLOR = '#FFFFFF'
    MARKER_OUTLINE_WIDTH = 2
    MARKER_OPACITY = 0.8

    # ============================================================================
    # UI SETTINGS
    # ============================================================================
    SIDEBAR_STATE = "expanded"

    # Default country for city searches
    DEFAULT_COUNTRY = "USA"

    # ============================================================================
    # LOGGING SETTINGS
    # ============================================================================
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def validate(cls) -> bool:
        """
        Validate that the configuration is usable.

        Returns:
            True if valid, False otherwise
        """
        if not cls.OVERPASS_ENDPOINTS:
            print("ERROR: OVERPASS_ENDPOINTS must list at least one endpoint")
            return False

        if not (-90 <= cls.DEFAULT_CENTER_LAT <= 90 and -180 <= cls.DEFAULT_CENTER_LON <= 180):
            print("ERROR: default map center is not a valid coordinate")
            return False

        if cls.DEFAULT_SEARCH_RADIUS_M <= 0:
            print("ERROR: LDS_MAP_SEARCH_RADIUS_M must be positive")
            return False

        return True

    @classmethod
    def get_default_center(cls) -> Tuple[float, float]:
        """
        Get the default map center.

        Returns:
            (latitude, longitude) tuple
        """
        return (cls.DEFAULT_CENTER_LAT, cls.DEFAULT_CENTER_LON)

    @classmethod
    def get_marker_style(cls, subtype: str) -> Dict[str, Any]:
        """
        Get the marker style for a building subtype.

        Args:
            subtype: 'temple' or 'meetinghouse'

        Returns:
            Style dictionary (shape, color, size, label, icon)
        """
        return cls.MARKER_STYLES.get(subtype, cls.MARKER_STYLES['meetinghouse'])


# Create a singleton config instance
config = Config()


if __name__ == "__main__":
    """Test configuration loading."""
    print("=" * 60)
    print("Configuration Test")
    print("=" * 60)

    print("\nSearch Settings:")
    print(f"  Default Center: {Config.get_default_center()}")
    print(f"  Search Radius: {Config.DEFAULT_SEARCH_RADIUS_M} m")

    print("\nOverpass Endpoints:")
    for endpoint in Config.OVERPASS_ENDPOINTS:
        print(f"  {endpoint}")

    print("\nValidation:")
    if Config.validate():
        print("  ✓ Configuration is valid")
    else:
        print("  ✗ Configuration is invalid")
