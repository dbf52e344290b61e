"""
Utility functions for the LDS Buildings Map.

This package contains helper modules for:
- Input validation
- Geometry processing
- Map building and visualization
"""

from .validation import (
    validate_coordinates,
    validate_radius_km,
    validate_filter_type,
    sanitize_input
)

from .geo_utils import (
    calculate_distance,
    get_bounds,
    get_fit_view,
    select_zoom_level
)

from .map_builder import (
    MapBackend,
    FoliumMapBackend,
    create_marker_symbol,
    create_popup_content
)

__all__ = [
    # Validation
    'validate_coordinates',
    'validate_radius_km',
    'validate_filter_type',
    'sanitize_input',

    # Geo utilities
    'calculate_distance',
    'get_bounds',
    'get_fit_view',
    'select_zoom_level',

    # Map building
    'MapBackend',
    'FoliumMapBackend',
    'create_marker_symbol',
    'create_popup_content',
]
