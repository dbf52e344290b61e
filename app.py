"""
LDS Church Buildings Map - Streamlit Application

A web application that locates temples and meetinghouses of The Church
of Jesus Christ of Latter-day Saints on an interactive map, using
OpenStreetMap data from the Overpass API.
"""

import logging

import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

from config import Config
from logger_config import setup_logging
from city_fetcher import fetch_city_center, US_STATES
from building_normalizer import FilterType, buildings_to_records
from exceptions import MapAppError
from map_presenter import MapPresenter, load_buildings
from sample_data import SAMPLE_ELEMENTS
from utils.geo_utils import find_nearest_building, count_buildings_in_radius
from utils.map_builder import FoliumMapBackend, add_search_area_to_map
from utils.validation import (
    validate_city_name,
    validate_state_name,
    validate_coordinates,
    validate_radius_km,
    validate_filter_type,
    sanitize_input
)

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title=Config.APP_TITLE,
    page_icon=Config.APP_ICON,
    layout="wide",
    initial_sidebar_state=Config.SIDEBAR_STATE
)

# Custom CSS
st.markdown("""
    <style>
    .main-header {
        font-size: 2.6rem;
        font-weight: bold;
        color: #3b82f6;
        text-align: center;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.1rem;
        color: #666;
        text-align: center;
        margin-bottom: 1.5rem;
    }
    .stats-text {
        font-size: 1.05rem;
        color: #333;
        margin: 0.5rem 0 1rem 0;
    }
    </style>
""", unsafe_allow_html=True)

FILTER_LABELS = {
    FilterType.ALL.value: "All Buildings",
    FilterType.TEMPLE.value: "🏛️ Temples",
    FilterType.MEETINGHOUSE.value: "⛪ Meetinghouses",
}


def initialize_session_state():
    """Initialize session state variables."""
    if 'presenter' not in st.session_state:
        st.session_state.presenter = None
    if 'summary' not in st.session_state:
        st.session_state.summary = None
    if 'load_error' not in st.session_state:
        st.session_state.load_error = None
    if 'load_params' not in st.session_state:
        st.session_state.load_params = None
    if 'force_reload' not in st.session_state:
        st.session_state.force_reload = False
    if 'center_lat' not in st.session_state:
        st.session_state.center_lat = Config.DEFAULT_CENTER_LAT
    if 'center_lon' not in st.session_state:
        st.session_state.center_lon = Config.DEFAULT_CENTER_LON
    if 'radius_km' not in st.session_state:
        st.session_state.radius_km = Config.DEFAULT_SEARCH_RADIUS_M // 1000
    if 'use_sample_data' not in st.session_state:
        st.session_state.use_sample_data = False
    if 'building_filter' not in st.session_state:
        st.session_state.building_filter = FilterType.ALL.value
    if 'analysis_point' not in st.session_state:
        st.session_state.analysis_point = None


def render_header():
    """Render the application header."""
    st.markdown(f'<div class="main-header">{Config.APP_ICON} {Config.APP_TITLE}</div>',
                unsafe_allow_html=True)
    st.markdown(f'<div class="sub-header">{Config.APP_DESCRIPTION}</div>',
                unsafe_allow_html=True)


def render_city_search():
    """Render the city search that moves the search center."""
    st.sidebar.header("📍 Search Area")

    city_input = st.sidebar.text_input("City Name", placeholder="e.g., Independence")
    state_input = st.sidebar.selectbox("State", options=[""] + US_STATES)

    if st.sidebar.button("🔍 Center on City", use_container_width=True):
        if not city_input or not state_input:
            st.sidebar.error("Please enter both city and state")
            return

        city = sanitize_input(city_input)
        state = sanitize_input(state_input)

        if not validate_city_name(city):
            st.sidebar.error("Invalid city name")
            return

        if not validate_state_name(state):
            st.sidebar.error("Invalid state name")
            return

        with st.spinner(f"Locating {city}, {state}..."):
            center = fetch_city_center(city, state, Config.DEFAULT_COUNTRY)

        if center is None:
            st.sidebar.error(f"Could not find {city}, {state}")
            return

        # Set before the coordinate widgets below are created
        st.session_state.center_lat, st.session_state.center_lon = center
        st.sidebar.success(f"✓ Centered on {city}, {state}")


def render_sidebar():
    """Render the sidebar with search center, radius and data source."""
    render_city_search()

    st.sidebar.number_input("Latitude", min_value=-90.0, max_value=90.0,
                            format="%.4f", key="center_lat")
    st.sidebar.number_input("Longitude", min_value=-180.0, max_value=180.0,
                            format="%.4f", key="center_lon")

    st.sidebar.slider(
        "Search Radius (km)",
        min_value=Config.MIN_SEARCH_RADIUS_KM,
        max_value=Config.MAX_SEARCH_RADIUS_KM,
        step=5,
        key="radius_km",
        help="Distance from the center to search for buildings"
    )

    st.sidebar.divider()
    st.sidebar.toggle(
        "Use sample data",
        key="use_sample_data",
        help="Show bundled Kansas City sample buildings instead of querying the Overpass API"
    )

    if st.sidebar.button("🔄 Reload", type="primary", use_container_width=True):
        st.session_state.force_reload = True


def load_map(center, radius_m, use_sample_data):
    """
    Initialize the map and load buildings for a search area.

    On failure no map is kept, so a stale render is never shown.
    """
    logger.info("LDS Church Buildings Map loading...")
    st.session_state.load_error = None
    st.session_state.analysis_point = None
    st.session_state.building_filter = FilterType.ALL.value

    try:
        with st.spinner("Loading LDS buildings..."):
            presenter = MapPresenter(FoliumMapBackend())
            presenter.initialize(center)

            summary = load_buildings(
                presenter,
                center,
                radius_m,
                sample_elements=SAMPLE_ELEMENTS if use_sample_data else None
            )

        st.session_state.presenter = presenter
        st.session_state.summary = summary

    except MapAppError as e:
        logger.error(f"Error initializing application: {e}", exc_info=True)
        st.session_state.presenter = None
        st.session_state.summary = None
        st.session_state.load_error = str(e)


def render_filters(presenter: MapPresenter):
    """Render the building type filter."""
    selected = st.radio(
        "Filter by building type",
        options=list(FILTER_LABELS.keys()),
        format_func=lambda value: FILTER_LABELS[value],
        horizontal=True,
        key="building_filter"
    )

    if validate_filter_type(selected) and selected != presenter.current_filter.value:
        st.session_state.summary = presenter.filter(selected)


def render_statistics(presenter: MapPresenter):
    """Render the building counts."""
    summary = st.session_state.summary or presenter.summary()

    st.markdown(f'<div class="stats-text">{summary.text}</div>', unsafe_allow_html=True)

    col1, col2, col3 = st.columns(3)
    col1.metric(label="Total Buildings", value=summary.total)
    col2.metric(label="Temples", value=summary.temples)
    col3.metric(label="Meetinghouses", value=summary.meetinghouses)


def render_map(presenter: MapPresenter, center, radius_m):
    """Render the interactive map and capture clicks."""
    st.subheader("🗺️ Interactive Map")

    m = presenter.backend.build_map()
    add_search_area_to_map(m, center, radius_m)

    map_data = st_folium(
        m,
        width=1200,
        height=Config.MAP_HEIGHT,
        returned_objects=["last_clicked"],
        key="main_map"
    )

    # Store clicked location
    if map_data and map_data.get('last_clicked'):
        new_point = (map_data['last_clicked']['lat'], map_data['last_clicked']['lng'])
        old_point = st.session_state.analysis_point

        if (old_point is None or
                abs(old_point[0] - new_point[0]) > 0.001 or
                abs(old_point[1] - new_point[1]) > 0.001):
            st.session_state.analysis_point = new_point
            st.rerun()


def render_nearest_building(presenter: MapPresenter):
    """Show the nearest visible building to the last clicked point."""
    point = st.session_state.analysis_point
    if point is None:
        st.info("👆 **Click anywhere on the map** to find the nearest building")
        return

    buildings = presenter.visible_buildings()
    nearest = find_nearest_building(point, buildings)
    if nearest is None:
        return

    building, distance = nearest
    nearby = count_buildings_in_radius(point, buildings, 25.0)

    col1, col2 = st.columns(2)
    col1.metric(
        label="Nearest Building",
        value=f"{distance:.1f} km",
        help=f"{building.name} ({building.subtype.value.title()})"
    )
    col2.metric(label="Buildings within 25 km", value=nearby)


def render_building_table(presenter: MapPresenter):
    """Render the list of visible buildings."""
    buildings = presenter.visible_buildings()

    with st.expander(f"📋 View all {len(buildings)} buildings"):
        df = pd.DataFrame(buildings_to_records(buildings))
        st.dataframe(df, use_container_width=True, hide_index=True)


def main():
    """Main application function."""
    initialize_session_state()

    render_header()
    render_sidebar()

    lat = st.session_state.center_lat
    lon = st.session_state.center_lon
    radius_km = st.session_state.radius_km

    if not validate_coordinates(lat, lon):
        st.error("Please enter a valid latitude and longitude")
        return

    if not validate_radius_km(radius_km):
        st.error("Please choose a valid search radius")
        return

    center = (lat, lon)
    radius_m = int(radius_km * 1000)
    params = (center, radius_m, st.session_state.use_sample_data)

    # A center, radius or source change triggers a full reload
    if st.session_state.force_reload or st.session_state.load_params != params:
        st.session_state.force_reload = False
        st.session_state.load_params = params
        load_map(*params)

    if st.session_state.load_error:
        st.error(
            "⚠️ Could not load LDS buildings. The Overpass API may be busy; "
            "please try again in a moment or switch to sample data."
        )
        with st.expander("Details"):
            st.code(st.session_state.load_error)
        return

    presenter = st.session_state.presenter
    if presenter is None:
        return

    render_filters(presenter)
    render_statistics(presenter)
    render_map(presenter, center, radius_m)
    st.divider()
    render_nearest_building(presenter)
    render_building_table(presenter)


if __name__ == "__main__":
    main()
