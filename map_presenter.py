"""
Map presenter for the LDS Buildings Map.

Owns the presenter state (building list, active filter, live markers) and
drives a MapBackend: rendering markers, zooming to fit and filtering.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from building_fetcher import BuildingFetcher
from building_normalizer import (
    Building,
    FilterType,
    filter_buildings_by_type,
    get_building_counts,
    normalize_elements,
)
from config import Config
from exceptions import EmptyResultFailure, MapInitFailure
from utils.geo_utils import get_fit_view
from utils.map_builder import MapBackend, create_marker_symbol, create_popup_content

logger = logging.getLogger(__name__)


@dataclass
class PresenterState:
    """Mutable state of one map: the full list, the filter and live markers."""
    buildings: List[Building] = field(default_factory=list)
    current_filter: FilterType = FilterType.ALL
    markers: List[Any] = field(default_factory=list)
    initialized: bool = False


@dataclass(frozen=True)
class BuildingSummary:
    """Counts shown under the map."""
    total: int
    visible: int
    temples: int
    meetinghouses: int

    @property
    def text(self) -> str:
        return (
            f"Showing {self.visible} of {self.total} "
            f"({self.temples} temples, {self.meetinghouses} meetinghouses)"
        )


class MapPresenter:
    """
    Presents a building list on a map backend.

    A presenter goes from uninitialized to initialized once; after that it
    accepts render and filter calls indefinitely.
    """

    def __init__(self, backend: MapBackend, state: Optional[PresenterState] = None) -> None:
        self.backend = backend
        self.state = state or PresenterState()

    @property
    def buildings(self) -> List[Building]:
        return self.state.buildings

    @property
    def current_filter(self) -> FilterType:
        return self.state.current_filter

    def _require_initialized(self) -> None:
        if not self.state.initialized:
            raise RuntimeError("Map has not been initialized")

    def initialize(self, center: Tuple[float, float], zoom: int = Config.DEFAULT_MAP_ZOOM) -> None:
        """
        Create the map view at a center.

        Args:
            center: (latitude, longitude) tuple
            zoom: Initial zoom level

        Raises:
            MapInitFailure: If the backend cannot create or load the view
        """
        logger.info("Initializing map...")
        try:
            self.backend.create_view(center, zoom)
            self.backend.when_ready()
        except Exception as e:
            logger.error(f"Error loading map view: {e}")
            raise MapInitFailure(f"Map could not be loaded: {e}") from e

        self.state.markers = []
        self.state.initialized = True
        logger.info("Map view loaded successfully")

    def _clear_markers(self) -> None:
        for handle in self.state.markers:
            self.backend.remove_marker(handle)
        self.state.markers = []

    def _draw_markers(self, buildings: Sequence[Building]) -> None:
        self._clear_markers()
        for building in buildings:
            handle = self.backend.add_marker(
                building.coordinates,
                create_marker_symbol(building.subtype),
                building.name,
                create_popup_content(building),
                payload=building
            )
            self.state.markers.append(handle)

    def render(self, buildings: List[Building]) -> None:
        """
        Replace all markers with one marker per building.

        The list becomes the presenter's full building list and the filter
        resets to all buildings.

        Args:
            buildings: Normalized buildings
        """
        self._require_initialized()
        logger.info(f"Loading {len(buildings)} buildings on map")

        self.state.buildings = list(buildings)
        self.state.current_filter = FilterType.ALL
        self._draw_markers(self.state.buildings)

        if buildings:
            self.zoom_to_fit(buildings)

    def zoom_to_fit(self, buildings: List[Building]) -> None:
        """
        Move the view so every building is visible.

        Does nothing for an empty list.
        """
        self._require_initialized()

        view = get_fit_view(buildings)
        if view is None:
            return

        center, zoom = view
        self.backend.go_to(center, zoom)

    def filter(self, filter_type: FilterType) -> BuildingSummary:
        """
        Show only the buildings of one subtype (or all of them).

        Args:
            filter_type: FilterType or its string value

        Returns:
            Summary with the visible count for the new filter
        """
        self._require_initialized()
        filter_type = FilterType(filter_type)
        logger.info(f"Filtering buildings: {filter_type.value}")

        visible = filter_buildings_by_type(self.state.buildings, filter_type)
        self.state.current_filter = filter_type
        self._draw_markers(visible)

        summary = self.summary()
        logger.info(f"Filter applied, showing {summary.visible}")
        return summary

    def counts(self) -> dict:
        """Counts of the full building list by subtype."""
        return get_building_counts(self.state.buildings)

    def summary(self) -> BuildingSummary:
        """Summary of the full list and the markers currently shown."""
        counts = self.counts()
        return BuildingSummary(
            total=counts['total'],
            visible=len(self.state.markers),
            temples=counts['temples'],
            meetinghouses=counts['meetinghouses'],
        )

    def visible_buildings(self) -> List[Building]:
        """Buildings matching the active filter."""
        return filter_buildings_by_type(self.state.buildings, self.state.current_filter)


def load_buildings(
    presenter: MapPresenter,
    center: Tuple[float, float],
    radius: int = Config.DEFAULT_SEARCH_RADIUS_M,
    fetcher: Optional[BuildingFetcher] = None,
    sample_elements: Optional[List[dict]] = None
) -> BuildingSummary:
    """
    Fetch, normalize and render the buildings around a center.

    Args:
        presenter: Initialized presenter
        center: (latitude, longitude) of the search center
        radius: Search radius in meters
        fetcher: Fetcher to use; a default BuildingFetcher when omitted
        sample_elements: Raw elements to use instead of querying Overpass

    Returns:
        Summary after rendering

    Raises:
        FetchFailure: If every Overpass mirror failed
        EmptyResultFailure: If no buildings were found
    """
    if sample_elements is not None:
        logger.info(f"Using {len(sample_elements)} sample elements")
        buildings = normalize_elements(sample_elements)
    else:
        fetcher = fetcher or BuildingFetcher()
        buildings = fetcher.fetch_buildings(center, radius)

    if not buildings:
        raise EmptyResultFailure("No buildings found in the specified area")

    presenter.render(buildings)

    summary = presenter.summary()
    logger.info(
        f"Map loaded successfully: {summary.total} buildings "
        f"({summary.temples} temples, {summary.meetinghouses} meetinghouses)"
    )
    return summary
