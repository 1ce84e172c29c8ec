from .base import GeocodeMatch, GeocodingProvider
from .resolver import get_geocoding_provider

__all__ = ["GeocodeMatch", "GeocodingProvider", "get_geocoding_provider"]
