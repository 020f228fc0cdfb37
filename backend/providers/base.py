# providers/base.py
# capability interfaces the pipeline depends on. production clients talk to
# Google Maps Platform; tests plug in in-memory doubles

from abc import ABC, abstractmethod
from typing import List

from models import Candidate, Coordinates


class ProviderError(Exception):
    """Transport failure, non-2xx status or undecodable payload from a provider."""


class GeocodeProvider(ABC):

    @abstractmethod
    async def geocode_postal_code(self, zip_code: str) -> Coordinates:
        """Return the coordinate for a US postal code or raise ProviderError."""


class PlaceSearchProvider(ABC):

    @abstractmethod
    async def search_nearby(self, origin: Coordinates, radius_m: int, place_type: str, limit: int) -> List[Candidate]:
        pass

    @abstractmethod
    async def get_address_components(self, place_id: str) -> List[dict]:
        """
        Address components for one place, each shaped like
        {"longText": ..., "shortText": ..., "types": [...]}.
        """
