"""
Geometry utilities for the LDS Buildings Map.

Provides functions for working with building coordinates,
including bounding boxes, zoom selection and distance calculations.
"""

import logging
from math import radians, sin, cos, sqrt, atan2
from typing import List, Optional, Sequence, Tuple

import geopandas as gpd
from shapely.geometry import Point

from building_normalizer import Building
from config import Config

logger = logging.getLogger(__name__)


def calculate_distance(
    point1: Tuple[float, float],
    point2: Tuple[float, float]
) -> float:
    """
    Calculate distance between two points in kilometers using Haversine formula.

    Args:
        point1: (latitude, longitude) tuple
        point2: (latitude, longitude) tuple

    Returns:
        Distance in kilometers
    """
    lat1, lon1 = point1
    lat2, lon2 = point2

    # Earth's radius in kilometers
    R = 6371.0

    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)

    a = sin(dlat / 2)**2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2)**2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return round(R * c, 2)


def buildings_to_gdf(buildings: List[Building]) -> gpd.GeoDataFrame:
    """
    Convert buildings to a point GeoDataFrame in EPSG:4326.

    Args:
        buildings: Building records

    Returns:
        GeoDataFrame with id, name and subtype columns
    """
    return gpd.GeoDataFrame(
        {
            'id': [b.id for b in buildings],
            'name': [b.name for b in buildings],
            'subtype': [b.subtype.value for b in buildings],
        },
        geometry=[Point(b.lon, b.lat) for b in buildings],
        crs='EPSG:4326'
    )


def get_bounds(buildings: List[Building]) -> Optional[Tuple[float, float, float, float]]:
    """
    Get the bounding box of a building list.

    Args:
        buildings: Building records

    Returns:
        Tuple of (min_lon, min_lat, max_lon, max_lat), or None for an empty list
    """
    if not buildings:
        return None

    bounds = buildings_to_gdf(buildings).total_bounds  # [minx, miny, maxx, maxy]
    return (float(bounds[0]), float(bounds[1]), float(bounds[2]), float(bounds[3]))


def select_zoom_level(
    spread: float,
    steps: Sequence[Tuple[float, int]] = Config.ZOOM_STEPS,
    default: int = Config.FIT_DEFAULT_ZOOM
) -> int:
    """
    Pick a zoom level for a coordinate spread.

    Args:
        spread: Larger of the latitude and longitude spans, in degrees
        steps: (threshold, zoom) pairs ordered widest first
        default: Zoom when the spread is below every threshold

    Returns:
        Zoom level (coarser for wider spreads)
    """
    for threshold, zoom in steps:
        if spread > threshold:
            return zoom
    return default


def get_fit_view(buildings: List[Building]) -> Optional[Tuple[Tuple[float, float], int]]:
    """
    Compute the view that shows every building.

    Args:
        buildings: Building records

    Returns:
        ((center_lat, center_lon), zoom), or None for an empty list
    """
    bounds = get_bounds(buildings)
    if bounds is None:
        return None

    min_lon, min_lat, max_lon, max_lat = bounds
    center = ((min_lat + max_lat) / 2, (min_lon + max_lon) / 2)
    spread = max(max_lat - min_lat, max_lon - min_lon)

    return center, select_zoom_level(spread)


def find_nearest_building(
    point: Tuple[float, float],
    buildings: List[Building]
) -> Optional[Tuple[Building, float]]:
    """
    Find the building closest to a point.

    Args:
        point: (latitude, longitude) tuple
        buildings: Building records

    Returns:
        (building, distance_km), or None if there are no buildings
    """
    if not buildings:
        return None

    nearest = min(buildings, key=lambda b: calculate_distance(point, b.coordinates))
    return nearest, calculate_distance(point, nearest.coordinates)


def count_buildings_in_radius(
    point: Tuple[float, float],
    buildings: List[Building],
    radius_km: float
) -> int:
    """
    Count buildings within a radius of a point.

    Args:
        point: (latitude, longitude) tuple
        buildings: Building records
        radius_km: Radius in kilometers

    Returns:
        Number of buildings within the radius
    """
    return sum(1 for b in buildings if calculate_distance(point, b.coordinates) <= radius_km)
