"""
Resource Resolver - answers directory queries for relief/resource centers.

A query runs as a two-stage pipeline:

1. validate: a user-supplied city is looked up with the external geocoder.
   The result is an explicit CityCheck, either Verified(city) or
   Unknown(city). The geocoder only decides whether the place exists; it
   never contributes resource data.
2. query: only a Verified city reaches the local store.

Without a city, the first stage is skipped entirely and the directory is
listed unfiltered.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from app.core.errors import CityNotFound
from app.core.settings import settings
from app.services.geocoding import GeocodingProvider, get_geocoding_provider
from app.services.resource_service import ResourceRepository, get_resource_repository
from app.utils.geocoding import geocode_query, normalize_city_query

logger = logging.getLogger(__name__)

ALL_RESOURCES_LIMIT = 100
CITY_RESOURCES_LIMIT = 50


@dataclass(frozen=True)
class Verified:
    city: str


@dataclass(frozen=True)
class Unknown:
    city: str


CityCheck = Union[Verified, Unknown]


class ResourceResolver:
    def __init__(
        self,
        geocoder: GeocodingProvider,
        repository: ResourceRepository,
        country: str = "India",
        all_limit: int = ALL_RESOURCES_LIMIT,
        city_limit: int = CITY_RESOURCES_LIMIT,
    ):
        self.geocoder = geocoder
        self.repository = repository
        self.country = country
        self.all_limit = all_limit
        self.city_limit = city_limit

    def verify_city(self, city: str) -> CityCheck:
        """
        Stage 1: ask the geocoder whether `city` names a real place.

        Raises UpstreamUnavailable if the geocoder cannot answer.
        """
        matches = self.geocoder.search(geocode_query(city, self.country), limit=1)
        if not matches:
            logger.info(f"Geocoder found no match for city '{city}'")
            return Unknown(city)
        return Verified(city)

    def resources_for(self, check: Verified) -> List[Dict]:
        """Stage 2: store lookup for a verified city."""
        return self.repository.find_by_city(check.city, limit=self.city_limit)

    def resolve(self, city: Optional[str]) -> List[Dict]:
        """
        Resources for an optional city filter.

        Raises:
            CityNotFound: the geocoder does not know the city
            UpstreamUnavailable: the geocoder is unreachable or timed out
            StoreUnavailable: the store is unreachable
        """
        city = normalize_city_query(city)
        if city is None:
            return self.repository.list_all(limit=self.all_limit)

        check = self.verify_city(city)
        if isinstance(check, Unknown):
            raise CityNotFound()
        return self.resources_for(check)


# Global resolver instance (singleton pattern)
_resource_resolver: Optional[ResourceResolver] = None


def get_resource_resolver() -> ResourceResolver:
    global _resource_resolver
    if _resource_resolver is None:
        _resource_resolver = ResourceResolver(
            geocoder=get_geocoding_provider(),
            repository=get_resource_repository(),
            country=settings.GEOCODING_COUNTRY,
        )
    return _resource_resolver
