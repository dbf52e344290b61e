"""
Bundled sample data for the LDS Buildings Map.

Raw Overpass-style elements around Kansas City, used when the app runs in
sample mode instead of querying the Overpass API.
"""

SAMPLE_ELEMENTS = [
    {
        "type": "way",
        "id": 118456209,
        "center": {"lat": 38.9506, "lon": -94.5297},
        "tags": {
            "amenity": "place_of_worship",
            "building": "temple",
            "denomination": "mormon",
            "religion": "christian",
            "name": "Kansas City Missouri Temple",
            "addr:housenumber": "7001",
            "addr:street": "NE Searcy Creek Parkway",
            "addr:city": "Kansas City",
            "addr:state": "MO",
            "addr:postcode": "64119",
        },
    },
    {
        "type": "node",
        "id": 4420197651,
        "lat": 39.0918,
        "lon": -94.4155,
        "tags": {
            "amenity": "place_of_worship",
            "denomination": "latter_day_saints",
            "religion": "christian",
            "name": "Independence Visitors' Center",
            "addr:street": "W Walnut Street",
            "addr:city": "Independence",
            "addr:state": "MO",
        },
    },
    {
        "type": "way",
        "id": 236118722,
        "center": {"lat": 39.0281, "lon": -94.6520},
        "tags": {
            "amenity": "place_of_worship",
            "denomination": "mormon",
            "religion": "christian",
            "name": "Overland Park Stake Center",
            "addr:city": "Overland Park",
            "addr:state": "KS",
        },
    },
    {
        "type": "way",
        "id": 301874455,
        "center": {"lat": 39.1855, "lon": -94.5731},
        "tags": {
            "amenity": "place_of_worship",
            "denomination": "mormon",
            "religion": "christian",
            "name": "Gladstone Ward",
        },
    },
    {
        "type": "node",
        "id": 5193820044,
        "lat": 38.8814,
        "lon": -94.8191,
        "tags": {
            "amenity": "place_of_worship",
            "denomination": "mormon",
            "religion": "christian",
            "addr:housenumber": "1100",
            "addr:street": "S Lone Elm Road",
            "addr:city": "Olathe",
            "addr:state": "KS",
            "addr:postcode": "66061",
        },
    },
    {
        "type": "way",
        "id": 410255730,
        "center": {"lat": 39.0119, "lon": -94.2722},
        "tags": {
            "amenity": "place_of_worship",
            "denomination": "latter_day_saints",
            "name": "Blue Springs Chapel",
        },
    },
]
