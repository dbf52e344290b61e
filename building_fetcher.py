"""
LDS building fetcher for the LDS Buildings Map.

This module handles:
- Building the Overpass QL query for LDS places of worship
- Submitting the query to a list of Overpass mirrors in order
- Backing off after rate limiting and falling through to the next mirror
- Handing the raw elements to the normalizer
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import requests

from building_normalizer import Building, normalize_elements
from config import Config
from exceptions import FetchFailure

logger = logging.getLogger(__name__)

# Tag filters that identify LDS buildings; each is combined with the
# element kinds listed next to it
LDS_TAG_FILTERS: List[Tuple[str, Tuple[str, ...]]] = [
    ('["amenity"="place_of_worship"]["denomination"="mormon"]', ('node', 'way', 'relation')),
    ('["amenity"="place_of_worship"]["denomination"="latter_day_saints"]', ('node', 'way', 'relation')),
    ('["amenity"="place_of_worship"]["religion"="christian"]["denomination"="mormon"]', ('node', 'way')),
    ('["building"="temple"]["denomination"="mormon"]', ('node', 'way')),
]


@dataclass
class EndpointAttempt:
    """Outcome of one request against one Overpass mirror."""
    endpoint: str
    elements: Optional[List[Dict[str, Any]]] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.elements is not None

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429


def build_overpass_query(lat: float, lon: float, radius: int = Config.DEFAULT_SEARCH_RADIUS_M) -> str:
    """
    Build the Overpass QL query for LDS buildings around a point.

    Args:
        lat: Latitude of the search center
        lon: Longitude of the search center
        radius: Search radius in meters

    Returns:
        Overpass QL query string
    """
    around = f"(around:{radius},{lat},{lon})"

    statements = []
    for tag_filter, kinds in LDS_TAG_FILTERS:
        for kind in kinds:
            statements.append(f"  {kind}{tag_filter}{around};")

    body = "\n".join(statements)
    return (
        f"[out:json][timeout:{Config.OVERPASS_QUERY_TIMEOUT}];\n"
        f"(\n{body}\n);\n"
        f"out center;"
    )


class BuildingFetcher:
    """
    Fetches raw LDS building elements from the Overpass API.

    Mirrors are tried strictly in order, one request each. A rate-limited
    mirror is followed by a short randomized pause; any other failure moves
    on immediately. The first successful response wins.
    """

    def __init__(
        self,
        endpoints: Optional[Sequence[str]] = None,
        session: Optional[requests.Session] = None,
        timeout: float = Config.OVERPASS_TIMEOUT,
        backoff_base: float = Config.RATE_LIMIT_BACKOFF_BASE,
        backoff_jitter: float = Config.RATE_LIMIT_BACKOFF_JITTER,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.endpoints = list(Config.OVERPASS_ENDPOINTS if endpoints is None else endpoints)
        self.session = session or requests.Session()
        self.timeout = timeout
        self.backoff_base = backoff_base
        self.backoff_jitter = backoff_jitter
        self._sleep = sleep

    def _backoff_delay(self) -> float:
        return self.backoff_base + random.random() * self.backoff_jitter

    def _attempt(self, endpoint: str, query: str) -> EndpointAttempt:
        """
        Send the query to one mirror.

        Transport and HTTP failures are returned as an EndpointAttempt with
        an error instead of being raised.
        """
        try:
            response = self.session.post(
                endpoint,
                data={'data': query},
                headers={
                    'Content-Type': 'application/x-www-form-urlencoded',
                    'User-Agent': Config.USER_AGENT,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            return EndpointAttempt(endpoint, error=f"Request failed: {e}")

        status = response.status_code

        if status == 429:
            return EndpointAttempt(endpoint, error="Rate limited (429)", status_code=status)

        if not response.ok:
            return EndpointAttempt(endpoint, error=f"HTTP error! status: {status}", status_code=status)

        try:
            payload = response.json()
        except ValueError as e:
            return EndpointAttempt(endpoint, error=f"Invalid JSON response: {e}", status_code=status)

        elements = payload.get('elements') if isinstance(payload, dict) else None
        if not isinstance(elements, list):
            return EndpointAttempt(endpoint, error="Response has no 'elements' list", status_code=status)

        return EndpointAttempt(endpoint, elements=elements, status_code=status)

    def fetch_raw_elements(
        self,
        center: Tuple[float, float],
        radius: int = Config.DEFAULT_SEARCH_RADIUS_M
    ) -> List[Dict[str, Any]]:
        """
        Fetch raw Overpass elements for LDS buildings around a center.

        Args:
            center: (latitude, longitude) of the search center
            radius: Search radius in meters

        Returns:
            List of raw Overpass elements from the first mirror that succeeded

        Raises:
            FetchFailure: If every mirror failed
        """
        lat, lon = center
        query = build_overpass_query(lat, lon, radius)
        logger.info(f"Fetching LDS buildings from Overpass API: lat={lat}, lon={lon}, radius={radius}")

        attempts: List[EndpointAttempt] = []
        last_error: Optional[str] = None

        for endpoint in self.endpoints:
            attempt = self._attempt(endpoint, query)
            attempts.append(attempt)

            if attempt.ok:
                logger.info(f"Received {len(attempt.elements)} elements from {endpoint}")
                return attempt.elements

            last_error = attempt.error
            logger.warning(f"Overpass endpoint {endpoint} failed: {attempt.error}")

            if attempt.rate_limited:
                self._sleep(self._backoff_delay())

        logger.error(f"All {len(self.endpoints)} Overpass endpoints failed")
        raise FetchFailure(last_error, attempts)

    def fetch_buildings(
        self,
        center: Tuple[float, float],
        radius: int = Config.DEFAULT_SEARCH_RADIUS_M
    ) -> List[Building]:
        """
        Fetch and normalize LDS buildings around a center.

        Raises:
            FetchFailure: If every mirror failed
        """
        elements = self.fetch_raw_elements(center, radius)
        buildings = normalize_elements(elements)
        logger.info(f"Processed {len(buildings)} buildings from {len(elements)} elements")
        return buildings


def fetch_lds_buildings(
    center: Optional[Tuple[float, float]] = None,
    radius: int = Config.DEFAULT_SEARCH_RADIUS_M
) -> List[Building]:
    """
    Fetch LDS buildings with the default mirror list.

    Args:
        center: (latitude, longitude); defaults to the configured center
        radius: Search radius in meters

    Returns:
        List of normalized buildings
    """
    if center is None:
        center = Config.get_default_center()
    return BuildingFetcher().fetch_buildings(center, radius)


if __name__ == "__main__":
    from logger_config import setup_logging
    setup_logging()

    try:
        buildings = fetch_lds_buildings()
        print(f"Found {len(buildings)} buildings")

        for building in buildings[:5]:
            print(f"- {building.name} ({building.subtype.value}) at {building.lat}, {building.lon}")

    except FetchFailure as e:
        logger.error(f"Example failed: {e}")
