# main.py
# FastAPI app exposing POST /itinerary (+ OPTIONS preflight) for the day-trip front-end

import logging
from typing import Tuple
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from config import LOG_LEVEL, Settings
from errors import ConfigurationError, ItineraryError
from itinerary import build_itinerary
from providers import GeocodeProvider, GoogleGeocoder, GooglePlaces, PlaceSearchProvider
from validation import parse_request

app = FastAPI(title="Daytripper Itinerary API", version="0.1.0")

# every response carries these, errors included. permissive for the front-end
CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-headers": "content-type",
    "access-control-allow-methods": "OPTIONS,POST",
}

# logging
logging.basicConfig(level=LOG_LEVEL)
log = logging.getLogger("daytripper")


# dependencies (overridden in tests)
def get_settings() -> Settings:
    return Settings.from_env()


def google_providers(settings: Settings) -> Tuple[GeocodeProvider, PlaceSearchProvider]:
    if not settings.google_maps_api_key:
        raise ConfigurationError("GOOGLE_MAPS_API_KEY is not configured")
    return (
        GoogleGeocoder(settings.google_maps_api_key, timeout=settings.geocode_timeout_s),
        GooglePlaces(settings.google_maps_api_key, timeout=settings.provider_timeout_s),
    )


def get_provider_factory():
    # called after validation so a bad body is a 400 even without a key
    return google_providers


# global JSON error handling
# - ItineraryError -> its own status + { "error": ..., "details"?: [...] }
# - HTTPException (404 route, 405 method, ...) -> { "error": <detail> }
# - any other exception -> 500 { "error": "Server error" }
@app.exception_handler(ItineraryError)
async def itinerary_error_handler(request: Request, exc: ItineraryError):
    log.warning("HTTP %s: %s", exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=CORS_HEADERS)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    log.warning("HTTP %s: %s", exc.status_code, exc.detail)
    headers = {**(exc.headers or {}), **CORS_HEADERS}
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # log stack once. do not leak details to client
    log.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "Server error"}, headers=CORS_HEADERS)


@app.options("/itinerary")
async def itinerary_preflight():
    return Response(status_code=204, headers=CORS_HEADERS)


@app.post("/itinerary")
async def create_itinerary(
    request: Request,
    settings: Settings = Depends(get_settings),
    make_providers=Depends(get_provider_factory),
):
    """
    Validate the body, then resolve origin, search each category, pick stops
    and (with explain) enrich their rationale.
    """
    # validate before anything touches the network or the credential check
    req = parse_request(await request.body())

    geocoder, places = make_providers(settings)

    resp = await build_itinerary(req, geocoder, places, settings)
    return JSONResponse(content=resp.model_dump(exclude_none=True), headers=CORS_HEADERS)


@app.get("/health")
def health():
    return {"ok": True}
