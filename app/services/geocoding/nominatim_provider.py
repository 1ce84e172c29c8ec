import logging
from typing import Any, List

import requests

from app.core.errors import UpstreamUnavailable
from .base import GeocodeMatch, GeocodingProvider, _to_float

logger = logging.getLogger(__name__)


class NominatimProvider(GeocodingProvider):
    """
    OpenStreetMap Nominatim forward-geocoding provider.

    - No API key required.
    - Uses a strict timeout (<= 3 seconds).
    - Includes a User-Agent header as required by Nominatim usage policy.
    """

    BASE_URL = "https://nominatim.openstreetmap.org/search"

    def __init__(self, user_agent: str = "safe-bharat-api/1.0", timeout: float = 3.0):
        self.user_agent = user_agent
        self.timeout = timeout

    def search(self, query: str, limit: int = 1) -> List[GeocodeMatch]:
        params = {
            "q": query,
            "format": "json",
            "limit": limit,
        }
        headers = {
            "User-Agent": self.user_agent,
        }
        try:
            resp = requests.get(self.BASE_URL, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Nominatim search error for '{query}': {e}")
            raise UpstreamUnavailable() from e

        if resp.status_code != 200:
            logger.warning(f"Nominatim search failed with status {resp.status_code}")
            raise UpstreamUnavailable()

        try:
            data: Any = resp.json()
        except ValueError as e:
            logger.warning(f"Nominatim returned a non-JSON body for '{query}'")
            raise UpstreamUnavailable() from e
        if not isinstance(data, list):
            logger.warning(f"Nominatim returned an unexpected payload for '{query}': {str(data)[:200]}")
            raise UpstreamUnavailable()

        return [
            GeocodeMatch(
                display_name=place.get("display_name", ""),
                latitude=_to_float(place.get("lat")),
                longitude=_to_float(place.get("lon")),
                provider="nominatim",
            )
            for place in data[:limit]
            if isinstance(place, dict)
        ]
