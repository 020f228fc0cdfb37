from providers.base import GeocodeProvider, PlaceSearchProvider, ProviderError
from providers.geo import GoogleGeocoder
from providers.places import GooglePlaces

__all__ = [
    "GeocodeProvider",
    "PlaceSearchProvider",
    "ProviderError",
    "GoogleGeocoder",
    "GooglePlaces",
]
