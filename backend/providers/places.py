# providers/places.py
# Google Places API (New): nearby search per place type + address components per place

import httpx
import logging
from typing import List, Optional
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from models import Candidate, Coordinates
from providers.base import PlaceSearchProvider, ProviderError

log = logging.getLogger("daytripper.places")

PLACES_URL = "https://places.googleapis.com/v1/places"

# API hard limits
MAX_RADIUS_M = 50000
MAX_RESULT_COUNT = 20

SEARCH_FIELDS = ",".join([
    "places.id",
    "places.displayName",
    "places.location",
    "places.formattedAddress",
    "places.websiteUri",
    "places.rating",
    "places.userRatingCount",
    "places.types",
])
DETAIL_FIELDS = "addressComponents"


def _num(v) -> Optional[float]:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v)
    return None


def to_candidate(p: dict) -> Candidate:
    """Map one Places API record onto a Candidate. Missing pieces stay None."""
    loc = p.get("location") or {}
    name = (p.get("displayName") or {}).get("text")
    rating = _num(p.get("rating"))
    count = p.get("userRatingCount")
    return Candidate(
        id=p.get("id") or None,
        name=name or None,
        lat=_num(loc.get("latitude")),
        lng=_num(loc.get("longitude")),
        address=p.get("formattedAddress"),
        website=p.get("websiteUri"),
        rating=rating if rating is not None and rating >= 0 else None,
        ratingCount=count if isinstance(count, int) and not isinstance(count, bool) and count >= 0 else None,
        types=list(p.get("types") or []),
    )


class GooglePlaces(PlaceSearchProvider):

    def __init__(self, api_key: str, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self, field_mask: str) -> dict:
        return {
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": field_mask,
            "User-Agent": "Daytripper/0.1",
            "Accept": "application/json",
        }

    async def _send(self, method: str, url: str, field_mask: str, label: str, **kwargs) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, headers=self._headers(field_mask), transport=self._transport) as client:
                r = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ProviderError(f"{label} request failed: {e.__class__.__name__}") from e
        if r.status_code != 200:
            raise ProviderError(f"{label} returned HTTP {r.status_code}")
        try:
            js = r.json()
        except ValueError as e:
            raise ProviderError(f"{label} returned invalid JSON") from e
        if js is None:
            return {}
        if not isinstance(js, dict):
            raise ProviderError(f"{label} returned {type(js).__name__}, expected an object")
        return js

    async def search_nearby(self, origin: Coordinates, radius_m: int, place_type: str, limit: int) -> List[Candidate]:
        if radius_m > MAX_RADIUS_M:
            log.info("radius %sm clamped to %sm for %s", radius_m, MAX_RADIUS_M, place_type)
            radius_m = MAX_RADIUS_M
        limit = max(1, min(limit, MAX_RESULT_COUNT))
        body = {
            "includedTypes": [place_type],
            "maxResultCount": limit,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": origin.lat, "longitude": origin.lng},
                    "radius": float(radius_m),
                }
            },
        }
        js = await self._send("POST", f"{PLACES_URL}:searchNearby", SEARCH_FIELDS, f"search {place_type}", json=body)
        places = js.get("places") or []
        if not isinstance(places, list):
            raise ProviderError(f"search {place_type} returned malformed places")
        try:
            return [to_candidate(p) for p in places[:limit]]
        except (AttributeError, PydanticValidationError) as e:
            raise ProviderError(f"search {place_type} returned an unreadable place") from e

    async def get_address_components(self, place_id: str) -> List[dict]:
        url = f"{PLACES_URL}/{quote(place_id, safe='')}"
        js = await self._send("GET", url, DETAIL_FIELDS, "place detail")
        return list(js.get("addressComponents") or [])
