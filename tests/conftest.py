import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path for direct pytest runs
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from building_normalizer import Building, BuildingType  # noqa: E402
from utils.map_builder import MapBackend  # noqa: E402


class RecordingBackend(MapBackend):
    """In-memory MapBackend that records every call."""

    def __init__(self, fail_on_create=False, fail_on_ready=False):
        self.fail_on_create = fail_on_create
        self.fail_on_ready = fail_on_ready
        self.view = None
        self.markers = {}
        self.removed = []
        self.go_to_calls = []
        self._next_handle = 0

    def create_view(self, center, zoom):
        if self.fail_on_create:
            raise RuntimeError("map SDK unavailable")
        self.view = (center, zoom)

    def when_ready(self):
        if self.fail_on_ready:
            raise RuntimeError("view failed to load")

    def add_marker(self, location, symbol, title, popup_html, payload=None):
        self._next_handle += 1
        self.markers[self._next_handle] = {
            'location': location,
            'symbol': symbol,
            'title': title,
            'popup_html': popup_html,
            'payload': payload,
        }
        return self._next_handle

    def remove_marker(self, handle):
        self.removed.append(handle)
        del self.markers[handle]

    def go_to(self, center, zoom):
        self.go_to_calls.append((center, zoom))


def make_building(building_id, lat, lon, subtype=BuildingType.MEETINGHOUSE, name=None):
    return Building(
        id=building_id,
        coordinates=(lat, lon),
        name=name or f"Building {building_id}",
        subtype=subtype,
        address="Address not available",
        denomination="mormon",
        religion="christian",
        tags={},
    )


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def mixed_buildings():
    """Three temples followed by five meetinghouses."""
    temples = [
        make_building(i, 39.0 + i * 0.1, -94.5, BuildingType.TEMPLE, name=f"Temple {i}")
        for i in range(3)
    ]
    meetinghouses = [
        make_building(10 + i, 38.5 + i * 0.1, -94.0)
        for i in range(5)
    ]
    return temples + meetinghouses
