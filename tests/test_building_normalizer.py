from building_normalizer import (
    BuildingType,
    FilterType,
    buildings_to_records,
    classify_building,
    extract_coordinates,
    filter_buildings_by_type,
    format_address,
    get_building_counts,
    get_display_name,
    location_key,
    normalize_elements,
)


def _node(element_id, lat, lon, **tags):
    return {"type": "node", "id": element_id, "lat": lat, "lon": lon, "tags": tags}


def _way(element_id, lat, lon, **tags):
    return {"type": "way", "id": element_id, "center": {"lat": lat, "lon": lon}, "tags": tags}


def test_kansas_city_temple_duplicates_collapse_to_one_temple():
    elements = [
        {"type": "node", "id": 1, "lat": 39.10, "lon": -94.58,
         "tags": {"name": "Kansas City Temple", "building": "temple"}},
        {"type": "way", "id": 2, "center": {"lat": 39.10001, "lon": -94.58001},
         "tags": {"name": "Kansas City Temple"}},
    ]

    buildings = normalize_elements(elements)

    assert len(buildings) == 1
    assert buildings[0].id == 1
    assert buildings[0].subtype is BuildingType.TEMPLE
    assert buildings[0].coordinates == (39.10, -94.58)


def test_empty_tags_use_defaults():
    buildings = normalize_elements([{"type": "node", "id": 7, "lat": 39.0, "lon": -94.0, "tags": {}}])

    assert len(buildings) == 1
    building = buildings[0]
    assert building.name == "LDS Building"
    assert building.address == "Address not available"
    assert building.denomination == "mormon"
    assert building.religion == "christian"
    assert building.subtype is BuildingType.MEETINGHOUSE
    assert not building.has_address


def test_missing_tags_key_is_treated_as_empty():
    buildings = normalize_elements([{"type": "node", "id": 7, "lat": 39.0, "lon": -94.0}])
    assert buildings[0].name == "LDS Building"
    assert buildings[0].tags == {}


def test_elements_without_coordinates_are_skipped():
    elements = [
        {"type": "way", "id": 1, "tags": {"name": "No center"}},
        {"type": "relation", "id": 2, "center": {"lat": None, "lon": -94.0}},
        {"type": "node", "id": 3, "lat": "not-a-number", "lon": -94.0},
        "garbage",
        _node(4, 39.2, -94.2, name="Kept Ward"),
    ]

    buildings = normalize_elements(elements)

    assert [b.id for b in buildings] == [4]


def test_node_ignores_center_and_way_ignores_direct_coordinates():
    assert extract_coordinates({"type": "node", "lat": 1.5, "lon": 2.5, "center": {"lat": 9, "lon": 9}}) == (1.5, 2.5)
    assert extract_coordinates({"type": "way", "lat": 1.5, "lon": 2.5}) is None
    assert extract_coordinates({"type": "relation", "center": {"lat": 3, "lon": 4}}) == (3.0, 4.0)


def test_output_preserves_input_order():
    elements = [
        _way(30, 39.3, -94.3, name="C"),
        _node(10, 39.1, -94.1, name="A"),
        _node(20, 39.2, -94.2, name="B"),
    ]

    assert [b.name for b in normalize_elements(elements)] == ["C", "A", "B"]


def test_first_occurrence_wins_for_duplicate_location():
    elements = [
        _node(1, 39.5, -94.5, name="First"),
        _way(2, 39.5, -94.5, name="Second"),
    ]

    buildings = normalize_elements(elements)

    assert [b.name for b in buildings] == ["First"]


def test_buildings_two_rounding_steps_apart_are_kept():
    elements = [
        _node(1, 39.10000, -94.58000, name="North"),
        _node(2, 39.10002, -94.58000, name="South"),
    ]

    assert len(normalize_elements(elements)) == 2


def test_normalizing_repeated_input_matches_deduplicated_input():
    elements = [
        _node(1, 39.1, -94.1, name="A"),
        _way(2, 39.2, -94.2, name="B Temple"),
        _node(3, 39.3, -94.3),
    ]

    once = normalize_elements(elements)
    twice = normalize_elements(elements + elements)

    assert twice == once
    assert normalize_elements(elements) == once


def test_location_key_rounds_to_five_decimals():
    assert location_key(39.123456, -94.987654) == (3912346, -9498765)


def test_classify_by_name_case_insensitive():
    assert classify_building({"name": "Kansas City Missouri TEMPLE"}) is BuildingType.TEMPLE


def test_classify_by_denomination_containing_temple():
    assert classify_building({"denomination": "mormon_temple"}) is BuildingType.TEMPLE


def test_classify_by_building_tag():
    assert classify_building({"building": "temple"}) is BuildingType.TEMPLE
    assert classify_building({"building": "Temple"}) is BuildingType.TEMPLE
    assert classify_building({"building": "temple_annex"}) is BuildingType.MEETINGHOUSE


def test_classify_everything_else_as_meetinghouse():
    assert classify_building({}) is BuildingType.MEETINGHOUSE
    assert classify_building({"amenity": "place_of_worship", "name": "Olathe Stake Center"}) is BuildingType.MEETINGHOUSE
    # name:en is not consulted by the heuristic
    assert classify_building({"name:en": "Some Temple"}) is BuildingType.MEETINGHOUSE


def test_classify_is_deterministic():
    tags = {"name": "Ward Building", "denomination": "latter_day_saints", "building": "church"}
    results = {classify_building(dict(tags)) for _ in range(5)}
    assert results == {BuildingType.MEETINGHOUSE}


def test_display_name_fallbacks():
    assert get_display_name({"name": "Gladstone Ward", "name:en": "Other"}) == "Gladstone Ward"
    assert get_display_name({"name:en": "English Name"}) == "English Name"
    assert get_display_name({"name": ""}) == "LDS Building"


def test_format_address_full():
    tags = {
        "addr:housenumber": "7001",
        "addr:street": "NE Searcy Creek Parkway",
        "addr:city": "Kansas City",
        "addr:state": "MO",
        "addr:postcode": "64119",
    }
    assert format_address(tags) == "7001 NE Searcy Creek Parkway, Kansas City, MO, 64119"


def test_format_address_partial():
    assert format_address({"addr:street": "Main St", "addr:city": "Olathe"}) == "Main St, Olathe"
    # A house number without a street is dropped
    assert format_address({"addr:housenumber": "12", "addr:postcode": "66061"}) == "66061"
    assert format_address({}) == "Address not available"


def test_filter_and_counts(mixed_buildings):
    temples = filter_buildings_by_type(mixed_buildings, FilterType.TEMPLE)
    meetinghouses = filter_buildings_by_type(mixed_buildings, "meetinghouse")

    assert len(temples) == 3
    assert len(meetinghouses) == 5
    assert filter_buildings_by_type(mixed_buildings, FilterType.ALL) == mixed_buildings
    assert get_building_counts(mixed_buildings) == {'total': 8, 'temples': 3, 'meetinghouses': 5}


def test_buildings_to_records_hides_missing_address(mixed_buildings):
    records = buildings_to_records(mixed_buildings[:1])
    assert records[0]['Type'] == "Temple"
    assert records[0]['Address'] == ""
