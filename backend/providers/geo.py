# providers/geo.py
# google geocoding by US postal code (single call, no retry)

import httpx
from typing import Optional

from models import Coordinates
from providers.base import GeocodeProvider, ProviderError

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

HEADERS = {
    "User-Agent": "Daytripper/0.1",
    "Accept": "application/json",
}


class GoogleGeocoder(GeocodeProvider):

    def __init__(self, api_key: str, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._api_key = api_key
        self._timeout = timeout
        # tests inject httpx.MockTransport here
        self._transport = transport

    async def geocode_postal_code(self, zip_code: str) -> Coordinates:
        params = {
            "components": f"postal_code:{zip_code}|country:US",
            "key": self._api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, headers=HEADERS, transport=self._transport) as client:
                r = await client.get(GEOCODE_URL, params=params)
        except httpx.HTTPError as e:
            raise ProviderError(f"geocode request failed: {e.__class__.__name__}") from e
        if r.status_code != 200:
            raise ProviderError(f"geocode returned HTTP {r.status_code}")

        try:
            js = r.json()
        except ValueError as e:
            raise ProviderError("geocode returned invalid JSON") from e
        if not isinstance(js, dict):
            raise ProviderError("geocode returned a non-object payload")

        # google reports "ZERO_RESULTS" with a 200
        status = js.get("status")
        if status not in (None, "OK"):
            raise ProviderError(f"geocode status {status}")
        results = js.get("results") or []
        if not results:
            raise ProviderError(f"no geocode results for {zip_code}")

        loc = ((results[0].get("geometry") or {}).get("location")) or {}
        lat, lng = loc.get("lat"), loc.get("lng")
        if not _is_number(lat) or not _is_number(lng):
            raise ProviderError("geocode result has no numeric coordinates")
        return Coordinates(lat=float(lat), lng=float(lng))


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)
