import logging
from typing import Any, List

import requests

from app.core.errors import UpstreamUnavailable
from .base import GeocodeMatch, GeocodingProvider, _to_float

logger = logging.getLogger(__name__)


class GoogleMapsProvider(GeocodingProvider):
    """
    Google Maps forward-geocoding provider.

    - Used only when GEOCODING_PROVIDER=google AND GOOGLE_MAPS_API_KEY is set.
    - ZERO_RESULTS means the place is unknown; any other non-OK status is
      treated as the service being unavailable.
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(self, api_key: str, timeout: float = 3.0):
        self.api_key = api_key
        self.timeout = timeout

    def search(self, query: str, limit: int = 1) -> List[GeocodeMatch]:
        params = {
            "address": query,
            "key": self.api_key,
        }
        try:
            resp = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Google Maps geocode error for '{query}': {e}")
            raise UpstreamUnavailable() from e

        if resp.status_code != 200:
            logger.warning(f"Google Maps geocode failed with status {resp.status_code}")
            raise UpstreamUnavailable()

        try:
            data: Any = resp.json()
        except ValueError as e:
            logger.warning(f"Google Maps returned a non-JSON body for '{query}'")
            raise UpstreamUnavailable() from e
        if not isinstance(data, dict):
            logger.warning(f"Google Maps returned an unexpected payload for '{query}'")
            raise UpstreamUnavailable()

        api_status = data.get("status")
        if api_status == "ZERO_RESULTS":
            return []
        if api_status != "OK":
            logger.warning(f"Google Maps geocode returned status {api_status}")
            raise UpstreamUnavailable()

        results = data.get("results") or []
        if not isinstance(results, list):
            logger.warning(f"Google Maps returned malformed results for '{query}'")
            raise UpstreamUnavailable()

        matches = []
        for result in results[:limit]:
            location = (result.get("geometry") or {}).get("location") or {}
            matches.append(
                GeocodeMatch(
                    display_name=result.get("formatted_address", ""),
                    latitude=_to_float(location.get("lat")),
                    longitude=_to_float(location.get("lng")),
                    provider="google",
                )
            )
        return matches
