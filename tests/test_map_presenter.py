from unittest.mock import MagicMock

import pytest

from building_normalizer import BuildingType, FilterType
from conftest import RecordingBackend, make_building
from exceptions import EmptyResultFailure, FetchFailure, MapInitFailure
from map_presenter import BuildingSummary, MapPresenter, load_buildings
from sample_data import SAMPLE_ELEMENTS

CENTER = (39.0997, -94.5786)


@pytest.fixture
def presenter(backend):
    p = MapPresenter(backend)
    p.initialize(CENTER)
    return p


def test_initialize_positions_view_at_default_zoom(backend):
    presenter = MapPresenter(backend)
    presenter.initialize(CENTER)

    assert backend.view == (CENTER, 8)
    assert presenter.state.initialized


@pytest.mark.parametrize("kwargs", [{"fail_on_create": True}, {"fail_on_ready": True}])
def test_initialize_failure_raises_map_init_failure(kwargs):
    presenter = MapPresenter(RecordingBackend(**kwargs))

    with pytest.raises(MapInitFailure):
        presenter.initialize(CENTER)

    assert not presenter.state.initialized


def test_operations_require_initialization(backend, mixed_buildings):
    presenter = MapPresenter(backend)

    with pytest.raises(RuntimeError):
        presenter.render(mixed_buildings)
    with pytest.raises(RuntimeError):
        presenter.filter(FilterType.TEMPLE)


def test_render_adds_one_marker_per_building(presenter, backend, mixed_buildings):
    presenter.render(mixed_buildings)

    assert len(backend.markers) == 8
    payloads = [m['payload'] for m in backend.markers.values()]
    assert payloads == mixed_buildings

    temple_marker = next(m for m in backend.markers.values() if m['payload'].subtype is BuildingType.TEMPLE)
    ward_marker = next(m for m in backend.markers.values() if m['payload'].subtype is BuildingType.MEETINGHOUSE)
    assert temple_marker['symbol'] != ward_marker['symbol']
    assert temple_marker['title'] in temple_marker['popup_html']


def test_render_replaces_previous_markers(presenter, backend, mixed_buildings):
    presenter.render(mixed_buildings)
    first_handles = set(backend.markers)

    presenter.render(mixed_buildings[:2])

    assert len(backend.markers) == 2
    assert set(backend.removed) == first_handles
    assert presenter.buildings == mixed_buildings[:2]


def test_render_zooms_to_fit(presenter, backend):
    buildings = [
        make_building(1, 39.0, -95.0),
        make_building(2, 41.0, -94.0),
    ]

    presenter.render(buildings)

    assert backend.go_to_calls == [((40.0, -94.5), 7)]


def test_render_empty_list_does_not_zoom(presenter, backend):
    presenter.render([])

    assert backend.markers == {}
    assert backend.go_to_calls == []


def test_zoom_to_fit_empty_list_is_noop(presenter, backend):
    presenter.zoom_to_fit([])
    assert backend.go_to_calls == []


def test_filter_temples_summary(presenter, backend, mixed_buildings):
    presenter.render(mixed_buildings)

    summary = presenter.filter("temple")

    assert summary == BuildingSummary(total=8, visible=3, temples=3, meetinghouses=5)
    assert summary.text == "Showing 3 of 8 (3 temples, 5 meetinghouses)"
    assert len(backend.markers) == 3
    assert all(m['payload'].subtype is BuildingType.TEMPLE for m in backend.markers.values())
    assert presenter.current_filter is FilterType.TEMPLE


def test_filter_back_to_all_restores_every_marker(presenter, backend, mixed_buildings):
    presenter.render(mixed_buildings)
    presenter.filter(FilterType.MEETINGHOUSE)

    summary = presenter.filter(FilterType.ALL)

    assert summary.visible == 8
    assert len(backend.markers) == 8
    assert presenter.visible_buildings() == mixed_buildings


def test_render_resets_filter(presenter, mixed_buildings):
    presenter.render(mixed_buildings)
    presenter.filter(FilterType.TEMPLE)

    presenter.render(mixed_buildings)

    assert presenter.current_filter is FilterType.ALL
    assert presenter.summary().visible == 8


def test_filter_does_not_move_the_view(presenter, backend, mixed_buildings):
    presenter.render(mixed_buildings)
    calls = list(backend.go_to_calls)

    presenter.filter(FilterType.TEMPLE)

    assert backend.go_to_calls == calls


def test_load_buildings_renders_fetched_buildings(presenter, backend):
    fetcher = MagicMock()
    fetcher.fetch_buildings.return_value = [
        make_building(1, 39.0, -94.0, BuildingType.TEMPLE),
        make_building(2, 39.2, -94.2),
    ]

    summary = load_buildings(presenter, CENTER, 5000, fetcher=fetcher)

    fetcher.fetch_buildings.assert_called_once_with(CENTER, 5000)
    assert summary.text == "Showing 2 of 2 (1 temples, 1 meetinghouses)"
    assert len(backend.markers) == 2


def test_load_buildings_empty_result_raises(presenter, backend):
    fetcher = MagicMock()
    fetcher.fetch_buildings.return_value = []

    with pytest.raises(EmptyResultFailure):
        load_buildings(presenter, CENTER, 5000, fetcher=fetcher)

    assert backend.markers == {}


def test_load_buildings_propagates_fetch_failure(presenter):
    fetcher = MagicMock()
    fetcher.fetch_buildings.side_effect = FetchFailure("Rate limited (429)")

    with pytest.raises(FetchFailure):
        load_buildings(presenter, CENTER, 5000, fetcher=fetcher)


def test_load_buildings_with_sample_data(presenter):
    summary = load_buildings(presenter, CENTER, sample_elements=SAMPLE_ELEMENTS)

    assert summary.total == len(SAMPLE_ELEMENTS)
    assert summary.temples == 1
    assert summary.meetinghouses == len(SAMPLE_ELEMENTS) - 1
