"""
Map building utilities for the LDS Buildings Map.

Defines the map backend interface used by the presenter and its Folium
implementation, plus the marker symbols, popups and legend it draws.
"""

import html
import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import folium
from branca.element import MacroElement
from jinja2 import Template

from building_normalizer import Building, BuildingType
from config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerSymbol:
    """Visual encoding of a marker."""
    shape: str
    color: str
    size: int
    outline_color: str = Config.MARKER_OUTLINE_COLOR
    outline_width: int = Config.MARKER_OUTLINE_WIDTH
    opacity: float = Config.MARKER_OPACITY


def create_marker_symbol(subtype: BuildingType) -> MarkerSymbol:
    """
    Create the marker symbol for a building subtype.

    Args:
        subtype: Building subtype

    Returns:
        MarkerSymbol (gold diamond for temples, blue circle for meetinghouses)
    """
    style = Config.get_marker_style(BuildingType(subtype).value)
    return MarkerSymbol(shape=style['shape'], color=style['color'], size=style['size'])


def create_popup_content(building: Building) -> str:
    """
    Create popup HTML for a building.

    The address row is left out when the address is not available.

    Args:
        building: Building to describe

    Returns:
        HTML string
    """
    style = Config.get_marker_style(building.subtype.value)

    rows = [("Type", f"{style['icon']} {style['label']}")]
    if building.has_address:
        rows.append(("Address", html.escape(building.address)))
    if building.denomination:
        rows.append(("Denomination", html.escape(building.denomination)))
    rows.append(("Coordinates", f"{building.lat:.4f}, {building.lon:.4f}"))

    row_html = "".join(
        f'<p style="margin: 5px 0;"><b>{label}:</b> {value}</p>'
        for label, value in rows
    )

    return (
        '<div style="font-family: Arial, sans-serif; min-width: 180px;">'
        f'<h4 style="margin: 0 0 10px 0;">{html.escape(building.name)}</h4>'
        f'{row_html}'
        '</div>'
    )


def create_legend() -> str:
    """
    Create HTML legend for the building subtypes.

    Returns:
        HTML string for legend
    """
    legend_html = '''
    <div id="map-legend" style="
        position: absolute;
        bottom: 30px;
        right: 10px;
        width: 170px;
        background-color: white;
        border: 2px solid #333;
        border-radius: 8px;
        padding: 12px;
        font-family: 'Arial', sans-serif;
        font-size: 13px;
        z-index: 1000;
        box-shadow: 0 4px 6px rgba(0,0,0,0.3);
    ">
        <h4 style="margin: 0 0 8px 0; font-size: 14px;">Building Types</h4>
    '''

    for subtype in BuildingType:
        style = Config.get_marker_style(subtype.value)
        radius = '50%' if style['shape'] == 'circle' else '0'
        rotate = 'transform: rotate(45deg);' if style['shape'] == 'diamond' else ''

        legend_html += f'''
        <div style="margin: 6px 0; display: flex; align-items: center;">
            <span style="
                display: inline-block;
                width: 12px;
                height: 12px;
                background-color: {style['color']};
                border-radius: {radius};
                border: 2px solid #333;
                margin-right: 8px;
                {rotate}
            "></span>
            <span style="color: #333;">{style['label']}</span>
        </div>
        '''

    legend_html += '</div>'

    return legend_html


class MapBackend(ABC):
    """
    Map rendering capability used by the presenter.

    Implementations own a single map view and the markers drawn on it.
    """

    @abstractmethod
    def create_view(self, center: Tuple[float, float], zoom: int) -> None:
        """Create the map view at a center and zoom."""

    @abstractmethod
    def when_ready(self) -> None:
        """Block until the view has loaded; raise if it failed to load."""

    @abstractmethod
    def add_marker(
        self,
        location: Tuple[float, float],
        symbol: MarkerSymbol,
        title: str,
        popup_html: str,
        payload: Any = None
    ) -> Any:
        """Add a point marker and return a handle for removing it."""

    @abstractmethod
    def remove_marker(self, handle: Any) -> None:
        """Remove a marker previously returned by add_marker."""

    @abstractmethod
    def go_to(self, center: Tuple[float, float], zoom: int) -> None:
        """Move the view to a new center and zoom."""


class FoliumMapBackend(MapBackend):
    """
    MapBackend that produces a Folium map.

    Folium maps are static documents, so the backend records the view and
    the live markers and builds a fresh folium.Map on request.
    """

    def __init__(self, tiles: str = Config.MAP_TILES, add_legend: bool = True) -> None:
        self.tiles = tiles
        self.add_legend = add_legend
        self.center: Optional[Tuple[float, float]] = None
        self.zoom: Optional[int] = None
        self.markers: Dict[int, Dict[str, Any]] = {}
        self._handles = itertools.count(1)
        self._ready = False

    def create_view(self, center: Tuple[float, float], zoom: int) -> None:
        self.center = center
        self.zoom = zoom
        self.markers.clear()

        # Building a map validates the tile provider
        self._create_base_map()
        self._ready = True
        logger.info(f"Map view created at {center} (zoom {zoom})")

    def when_ready(self) -> None:
        if not self._ready:
            raise RuntimeError("Map view has not been created")

    def add_marker(
        self,
        location: Tuple[float, float],
        symbol: MarkerSymbol,
        title: str,
        popup_html: str,
        payload: Any = None
    ) -> int:
        handle = next(self._handles)
        self.markers[handle] = {
            'location': location,
            'symbol': symbol,
            'title': title,
            'popup_html': popup_html,
            'payload': payload,
        }
        return handle

    def remove_marker(self, handle: int) -> None:
        self.markers.pop(handle, None)

    def go_to(self, center: Tuple[float, float], zoom: int) -> None:
        self.center = center
        self.zoom = zoom

    def _create_base_map(self) -> folium.Map:
        return folium.Map(
            location=list(self.center),
            zoom_start=self.zoom,
            tiles=self.tiles,
            control_scale=True
        )

    def build_map(self) -> folium.Map:
        """
        Build the Folium map for the current view and markers.

        Returns:
            Folium Map object
        """
        self.when_ready()
        m = self._create_base_map()

        groups: Dict[str, folium.FeatureGroup] = {}
        for marker in self.markers.values():
            payload = marker['payload']
            subtype = payload.subtype.value if isinstance(payload, Building) else 'meetinghouse'

            if subtype not in groups:
                label = Config.get_marker_style(subtype)['label']
                groups[subtype] = folium.FeatureGroup(name=f"{label}s").add_to(m)

            _marker_to_folium(marker).add_to(groups[subtype])

        if self.add_legend:
            add_legend_to_map(m)

        folium.LayerControl().add_to(m)
        return m


def _marker_to_folium(marker: Dict[str, Any]) -> folium.Marker:
    symbol: MarkerSymbol = marker['symbol']
    location = list(marker['location'])
    popup = folium.Popup(marker['popup_html'], max_width=300)
    # Leaflet renders tooltip text as HTML
    tooltip = html.escape(marker['title'])

    if symbol.shape == 'circle':
        return folium.CircleMarker(
            location=location,
            radius=symbol.size / 2,
            popup=popup,
            tooltip=tooltip,
            color=symbol.outline_color,
            weight=symbol.outline_width,
            fill=True,
            fill_color=symbol.color,
            fill_opacity=symbol.opacity
        )

    size = symbol.size
    diamond = (
        f'<div style="width: {size}px; height: {size}px; background-color: {symbol.color}; '
        f'opacity: {symbol.opacity}; border: {symbol.outline_width}px solid {symbol.outline_color}; '
        f'transform: rotate(45deg); box-sizing: border-box;"></div>'
    )
    return folium.Marker(
        location=location,
        popup=popup,
        tooltip=tooltip,
        icon=folium.DivIcon(html=diamond, icon_size=(size, size), icon_anchor=(size // 2, size // 2))
    )


def add_legend_to_map(map_obj: folium.Map) -> folium.Map:
    """
    Add the building type legend to a map.

    Args:
        map_obj: Folium Map object

    Returns:
        Updated Folium Map object
    """
    template = """
    {% macro html(this, kwargs) %}
    """ + create_legend() + """
    {% endmacro %}
    """

    macro = MacroElement()
    macro._template = Template(template)

    map_obj.get_root().add_child(macro)
    return map_obj


def add_search_area_to_map(
    map_obj: folium.Map,
    center: Tuple[float, float],
    radius_m: float
) -> folium.Map:
    """
    Draw the search center and radius on a map.

    Args:
        map_obj: Folium Map object
        center: (latitude, longitude) tuple
        radius_m: Search radius in meters

    Returns:
        Updated Folium Map object
    """
    radius_km = radius_m / 1000

    folium.Circle(
        location=list(center),
        radius=radius_m,
        color='#FF4444',
        fill=False,
        weight=2,
        dash_array='5, 5',
        tooltip=f"Search radius: {radius_km:g} km"
    ).add_to(map_obj)

    return map_obj

