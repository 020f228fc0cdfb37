"""Shared fixtures: in-memory provider doubles and candidate builders."""

from typing import Dict, List, Optional

import pytest

from config import Settings
from models import Candidate, Coordinates
from providers.base import GeocodeProvider, PlaceSearchProvider, ProviderError


PORTLAND = Coordinates(lat=45.5231, lng=-122.6765)


def make_candidate(
    id: Optional[str],
    name: Optional[str] = "Somewhere",
    rating: Optional[float] = None,
    count: Optional[int] = None,
    lat: Optional[float] = 45.52,
    lng: Optional[float] = -122.67,
    types: Optional[List[str]] = None,
    **kwargs,
) -> Candidate:
    return Candidate(
        id=id,
        name=name,
        rating=rating,
        ratingCount=count,
        lat=lat,
        lng=lng,
        types=types or [],
        **kwargs,
    )


class FakeGeocoder(GeocodeProvider):
    def __init__(self, result: Optional[Coordinates] = PORTLAND, error: Optional[Exception] = None) -> None:
        self.result = result
        self.error = error
        self.calls: List[str] = []

    async def geocode_postal_code(self, zip_code: str) -> Coordinates:
        self.calls.append(zip_code)
        if self.error:
            raise self.error
        return self.result


class FakePlaces(PlaceSearchProvider):
    """Returns fixture candidates keyed by places type; records every call."""

    def __init__(
        self,
        by_type: Optional[Dict[str, List[Candidate]]] = None,
        components: Optional[Dict[str, List[dict]]] = None,
        fail_types: Optional[set] = None,
        fail_details: bool = False,
    ) -> None:
        self.by_type = by_type or {}
        self.components = components or {}
        self.fail_types = fail_types or set()
        self.fail_details = fail_details
        self.search_calls: List[tuple] = []
        self.detail_calls: List[str] = []

    async def search_nearby(self, origin, radius_m, place_type, limit):
        self.search_calls.append((origin, radius_m, place_type, limit))
        if place_type in self.fail_types:
            raise ProviderError(f"{place_type} exploded")
        return list(self.by_type.get(place_type, []))

    async def get_address_components(self, place_id):
        self.detail_calls.append(place_id)
        if self.fail_details:
            raise ProviderError("details unavailable")
        return self.components.get(place_id, [])


def default_catalog() -> Dict[str, List[Candidate]]:
    return {
        "cafe": [
            make_candidate("cafe-1", "Slow Drip", rating=4.2, count=80, types=["cafe", "food"]),
            make_candidate("cafe-2", "Best Beans", rating=4.8, count=300, types=["cafe"]),
        ],
        "park": [
            make_candidate("park-1", "Forest Park", rating=4.7, count=9000, types=["park", "hiking_area"]),
        ],
        "museum": [
            make_candidate("museum-1", "Art Museum", rating=4.6, count=2000, types=["museum"],
                           website="https://museum.example"),
        ],
        "restaurant": [
            make_candidate("rest-1", "Thai Spot", rating=4.5, count=500, types=["restaurant", "thai_restaurant"],
                           address="1 Main St, Portland, OR"),
        ],
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(google_maps_api_key="test-key", provider_timeout_s=2, geocode_timeout_s=2)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def places() -> FakePlaces:
    return FakePlaces(by_type=default_catalog())
