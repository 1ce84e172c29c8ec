from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodeMatch:
    display_name: str
    latitude: Optional[float]
    longitude: Optional[float]
    provider: str


class GeocodingProvider(ABC):
    """
    Abstract forward-geocoding provider.

    Contract:
    - Input: free-text place query (e.g. "Pune, India"), maximum matches.
    - Output: list of GeocodeMatch; empty when the place is unknown.
    - Raises UpstreamUnavailable when the service cannot be reached,
      times out or answers with a non-200 status. An unknown place is
      NOT an error.
    - Implementations should enforce a network timeout <= 3 seconds.
    """

    @abstractmethod
    def search(self, query: str, limit: int = 1) -> List[GeocodeMatch]:
        raise NotImplementedError


def _to_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
