"""
Building normalizer for the LDS Buildings Map.

This module handles:
- Extracting a plottable coordinate from raw Overpass elements
- Deduplicating buildings that share a location
- Classifying buildings as temples or meetinghouses
- Formatting display names and addresses
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from config import Config

logger = logging.getLogger(__name__)


class BuildingType(str, Enum):
    """Subtype assigned to every building."""
    TEMPLE = "temple"
    MEETINGHOUSE = "meetinghouse"


class FilterType(str, Enum):
    """Marker filter selected in the UI."""
    ALL = "all"
    TEMPLE = "temple"
    MEETINGHOUSE = "meetinghouse"


@dataclass(frozen=True)
class Building:
    """A deduplicated, classified building ready for display."""
    id: Any
    coordinates: Tuple[float, float]
    name: str
    subtype: BuildingType
    address: str
    denomination: str
    religion: str
    tags: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def lat(self) -> float:
        return self.coordinates[0]

    @property
    def lon(self) -> float:
        return self.coordinates[1]

    @property
    def has_address(self) -> bool:
        return self.address != Config.ADDRESS_NOT_AVAILABLE


def extract_coordinates(element: Mapping[str, Any]) -> Optional[Tuple[float, float]]:
    """
    Get a representative (lat, lon) for a raw Overpass element.

    Nodes carry their own coordinates; ways and relations carry the
    center computed by ``out center``.

    Args:
        element: Raw Overpass element

    Returns:
        (latitude, longitude) tuple, or None if the element has no usable coordinate
    """
    if element.get('type') == 'node':
        source = element
    else:
        source = element.get('center')

    if not isinstance(source, Mapping):
        return None

    lat = source.get('lat')
    lon = source.get('lon')

    # bool is an int subclass; a True/False coordinate is malformed
    if isinstance(lat, bool) or isinstance(lon, bool):
        return None

    try:
        return (float(lat), float(lon))
    except (TypeError, ValueError):
        return None


def location_key(lat: float, lon: float, precision: int = Config.DEDUP_PRECISION) -> Tuple[int, int]:
    """
    Round a coordinate pair to a fixed number of decimal places.

    The pair of scaled integers is the deduplication key: two buildings
    with the same key are treated as the same place.

    Args:
        lat: Latitude
        lon: Longitude
        precision: Decimal places to keep

    Returns:
        (scaled latitude, scaled longitude) integers
    """
    scale = 10 ** precision
    return (round(lat * scale), round(lon * scale))


def _neighbouring_keys(key: Tuple[int, int]) -> Iterable[Tuple[int, int]]:
    lat_key, lon_key = key
    for d_lat in (-1, 0, 1):
        for d_lon in (-1, 0, 1):
            yield (lat_key + d_lat, lon_key + d_lon)


def is_duplicate_location(key: Tuple[int, int], seen: Set[Tuple[int, int]]) -> bool:
    """
    Check a location key against the keys already kept.

    Keys one rounding step apart count as the same place, so two points
    straddling a rounding boundary still collapse into one building.
    """
    return any(neighbour in seen for neighbour in _neighbouring_keys(key))


def classify_building(tags: Mapping[str, Any]) -> BuildingType:
    """
    Classify a building as a temple or a meetinghouse from its tags.

    This is a text heuristic over free-form OSM tags: a temple whose
    name and tags never mention "temple" is reported as a meetinghouse.

    Args:
        tags: OSM tag mapping

    Returns:
        BuildingType.TEMPLE or BuildingType.MEETINGHOUSE
    """
    name = str(tags.get('name') or '').lower()
    denomination = str(tags.get('denomination') or '').lower()
    building = str(tags.get('building') or '').lower()

    if (
        'temple' in name
        or 'temple' in denomination
        or building == 'temple'
        or (tags.get('amenity') == 'place_of_worship' and 'temple' in name)
    ):
        return BuildingType.TEMPLE

    return BuildingType.MEETINGHOUSE


def get_display_name(tags: Mapping[str, Any]) -> str:
    """
    Get the name shown on a marker.

    Args:
        tags: OSM tag mapping

    Returns:
        ``name``, else ``name:en``, else the generic building label
    """
    return tags.get('name') or tags.get('name:en') or Config.DEFAULT_BUILDING_NAME


def format_address(tags: Mapping[str, Any]) -> str:
    """
    Build a one-line address from OSM ``addr:*`` tags.

    Args:
        tags: OSM tag mapping

    Returns:
        Comma-joined address, or the "Address not available" sentinel
    """
    parts = []

    housenumber = tags.get('addr:housenumber')
    street = tags.get('addr:street')

    if housenumber and street:
        parts.append(f"{housenumber} {street}")
    elif street:
        parts.append(street)

    for key in ('addr:city', 'addr:state', 'addr:postcode'):
        if tags.get(key):
            parts.append(tags[key])

    return ", ".join(parts) if parts else Config.ADDRESS_NOT_AVAILABLE


def normalize_element(element: Mapping[str, Any], coordinates: Tuple[float, float]) -> Building:
    """Build a Building from a raw element and its extracted coordinates."""
    tags = element.get('tags')
    if not isinstance(tags, Mapping):
        tags = {}

    return Building(
        id=element.get('id'),
        coordinates=coordinates,
        name=get_display_name(tags),
        subtype=classify_building(tags),
        address=format_address(tags),
        denomination=tags.get('denomination') or Config.DEFAULT_DENOMINATION,
        religion=tags.get('religion') or Config.DEFAULT_RELIGION,
        tags=dict(tags),
    )


def normalize_elements(elements: Iterable[Any]) -> List[Building]:
    """
    Convert raw Overpass elements into a deduplicated building list.

    Elements without a coordinate, and elements at a location already
    taken by an earlier element, are skipped. Input order is preserved.

    Args:
        elements: Raw Overpass elements

    Returns:
        List of Building records
    """
    buildings: List[Building] = []
    seen: Set[Tuple[int, int]] = set()
    skipped = 0
    duplicates = 0

    for element in elements or []:
        if not isinstance(element, Mapping):
            skipped += 1
            continue

        coordinates = extract_coordinates(element)
        if coordinates is None:
            skipped += 1
            continue

        key = location_key(*coordinates)
        if is_duplicate_location(key, seen):
            duplicates += 1
            continue
        seen.add(key)

        buildings.append(normalize_element(element, coordinates))

    if skipped:
        logger.debug(f"Skipped {skipped} elements without coordinates")
    if duplicates:
        logger.info(f"Removed {duplicates} duplicate buildings")

    return buildings


def filter_buildings_by_type(
    buildings: List[Building],
    filter_type: FilterType
) -> List[Building]:
    """
    Restrict a building list to one subtype.

    Args:
        buildings: All buildings
        filter_type: FilterType (or its string value)

    Returns:
        Buildings matching the filter, in their original order
    """
    filter_type = FilterType(filter_type)

    if filter_type is FilterType.ALL:
        return list(buildings)

    return [b for b in buildings if b.subtype.value == filter_type.value]


def get_building_counts(buildings: List[Building]) -> Dict[str, int]:
    """
    Count buildings by subtype.

    Returns:
        Dictionary with 'total', 'temples' and 'meetinghouses'
    """
    temples = sum(1 for b in buildings if b.subtype is BuildingType.TEMPLE)
    return {
        'total': len(buildings),
        'temples': temples,
        'meetinghouses': len(buildings) - temples,
    }


def buildings_to_records(buildings: List[Building]) -> List[Dict[str, Any]]:
    """Flatten buildings into table rows for display."""
    return [
        {
            'Name': b.name,
            'Type': b.subtype.value.title(),
            'Address': b.address if b.has_address else '',
            'Latitude': round(b.lat, 5),
            'Longitude': round(b.lon, 5),
        }
        for b in buildings
    ]
