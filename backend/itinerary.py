# itinerary.py
# request -> origin -> candidates (fan-out per category) -> selection -> stops
# -> optional rationale enrichment -> response

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from config import Settings
from errors import CandidateFetchError, NoCandidatesError, OriginResolutionError
from models import (
    Candidate,
    Coordinates,
    ItineraryBody,
    ItineraryMeta,
    ItineraryRequest,
    ItineraryResponse,
    ItineraryStop,
    StopLinks,
    StopLocation,
)
from providers.base import GeocodeProvider, PlaceSearchProvider, ProviderError
from utils import adventure_score, maps_url, miles_to_meters, neighborhood_label, rank, select, total_hours

log = logging.getLogger("daytripper.itinerary")

# category -> places type
CATEGORY_TYPES = {
    "coffee": "cafe",
    "restaurant": "restaurant",
    "park": "park",
    "museum": "museum",
}

DURATION_MINUTES = {"coffee": 35, "restaurant": 75, "activity": 120}

MAX_ACTIVITIES = 2

# too generic to be useful as tags
_GENERIC_TYPES = {"point_of_interest", "establishment"}


@dataclass
class Pick:
    kind: str
    category: str
    candidate: Candidate


async def resolve_origin(req: ItineraryRequest, geocoder: GeocodeProvider, settings: Settings) -> Coordinates:
    if req.origin is not None:
        log.info("origin: explicit coordinate")
        return req.origin
    if not req.zipCode:
        raise OriginResolutionError("Either origin or zipCode is required")

    try:
        origin = await asyncio.wait_for(
            geocoder.geocode_postal_code(req.zipCode), timeout=settings.geocode_timeout_s
        )
    except asyncio.TimeoutError as e:
        raise OriginResolutionError(
            f"Geocoding {req.zipCode} timed out after {settings.geocode_timeout_s}s"
        ) from e
    except ProviderError as e:
        log.warning("geocode failed for %s: %s", req.zipCode, e)
        raise OriginResolutionError(f"Could not resolve zipCode {req.zipCode}") from e
    log.info("origin: geocoded %s", req.zipCode)
    return origin


async def fetch_candidates(
    origin: Coordinates, radius_m: int, places: PlaceSearchProvider, settings: Settings
) -> Dict[str, List[Candidate]]:
    """
    One search per category, all concurrent. Any failure aborts the whole
    fetch: in-flight searches are cancelled and CandidateFetchError propagates.
    """
    limit = settings.candidate_limit

    async def search(category: str, place_type: str) -> List[Candidate]:
        try:
            return await asyncio.wait_for(
                places.search_nearby(origin, radius_m, place_type, limit),
                timeout=settings.provider_timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise CandidateFetchError(
                f"{category} search timed out after {settings.provider_timeout_s}s"
            ) from e
        except ProviderError as e:
            log.warning("%s search failed: %s", category, e)
            raise CandidateFetchError(f"{category} search failed") from e

    tasks = [asyncio.ensure_future(search(c, t)) for c, t in CATEGORY_TYPES.items()]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for t in tasks:
            t.cancel()
        raise

    out = {c: list(items)[:limit] for c, items in zip(CATEGORY_TYPES, results)}
    log.info("candidates: %s", ", ".join(f"{c}={len(v)}" for c, v in out.items()))
    return out


def select_stops(candidates: Dict[str, List[Candidate]]) -> List[Pick]:
    """
    coffee (1) -> activities (best park + best museum, re-ranked, max 2) -> restaurant (1).
    A place already picked is never picked again.
    """
    taken = set()

    def take(category: str, limit: int = 1) -> List[Candidate]:
        chosen = select(candidates.get(category) or [], limit, taken)
        taken.update(c.id for c in chosen)
        return chosen

    coffee = take("coffee")
    park = take("park")
    museum = take("museum")
    restaurant = take("restaurant")

    category_of = {c.id: "park" for c in park}
    category_of.update({c.id: "museum" for c in museum})
    activities = rank(park + museum)[:MAX_ACTIVITIES]

    picks = [Pick("coffee", "coffee", c) for c in coffee]
    picks += [Pick("activity", category_of[c.id], c) for c in activities]
    picks += [Pick("restaurant", "restaurant", c) for c in restaurant]
    return picks


def _matching_intent(cand: Candidate, intents: List[str]) -> Optional[str]:
    haystack = " ".join([cand.name or ""] + [t.replace("_", " ") for t in cand.types]).lower()
    for intent in intents:
        if intent.strip() and intent.strip().lower() in haystack:
            return intent.strip()
    return None


def build_rationale(pick: Pick, req: ItineraryRequest) -> str:
    cand = pick.candidate
    prefs = req.preferences
    spice = prefs.spiceLabel if prefs else None
    score = adventure_score(prefs.adventureScore if prefs else None, spice)

    if pick.kind == "coffee":
        parts = ["Easy starting point to fuel the day."]
    elif pick.kind == "activity":
        if pick.category == "park":
            parts = ["Time outdoors to stretch your legs."]
        else:
            parts = ["A museum stop to slow down and look around."]
        intent = _matching_intent(cand, req.intents or [])
        if intent:
            parts.append(f"Matches your {intent} intent.")
        if score is not None and score > 7:
            parts.append(f"Picked with your adventure score of {score:g}/10 in mind.")
    else:
        parts = ["A sit-down meal to round out the day."]
        if spice:
            parts.append(f"Look for {spice} dishes to match your spice preference.")

    if cand.rating:
        if cand.ratingCount:
            parts.append(f"Rated {cand.rating:.1f} from {cand.ratingCount} reviews.")
        else:
            parts.append(f"Rated {cand.rating:.1f}.")
    return " ".join(parts)


def assemble_stops(picks: List[Pick], req: ItineraryRequest) -> List[ItineraryStop]:
    explain = bool(req.explain)
    stops: List[ItineraryStop] = []
    for order, pick in enumerate(picks, start=1):
        cand = pick.candidate
        tags = [t for t in cand.types if t not in _GENERIC_TYPES]
        stops.append(ItineraryStop(
            id=cand.id,
            order=order,
            kind=pick.kind,
            name=cand.name,
            estimatedDurationMinutes=DURATION_MINUTES[pick.kind],
            location=StopLocation(lat=cand.lat, lng=cand.lng, address=cand.address),
            links=StopLinks(googleMapsUrl=maps_url(cand.id), websiteUrl=cand.website),
            tags=tags or None,
            rationale=build_rationale(pick, req) if explain else None,
        ))
    return stops


async def enrich_rationale(
    stops: List[ItineraryStop], places: PlaceSearchProvider, settings: Settings
) -> List[ItineraryStop]:
    """
    Best effort: append a neighborhood label to each stop's rationale.
    Per-stop failures are logged and that stop is returned unchanged.
    """

    async def label_for(stop: ItineraryStop) -> Optional[str]:
        components = await asyncio.wait_for(
            places.get_address_components(stop.id), timeout=settings.provider_timeout_s
        )
        return neighborhood_label(components)

    results = await asyncio.gather(*(label_for(s) for s in stops), return_exceptions=True)

    out: List[ItineraryStop] = []
    for stop, res in zip(stops, results):
        if isinstance(res, BaseException):
            log.warning("enrichment skipped for %s: %r", stop.id, res)
            out.append(stop)
        elif res:
            rationale = f"{stop.rationale} ({res})" if stop.rationale else res
            out.append(stop.model_copy(update={"rationale": rationale}))
        else:
            out.append(stop)
    return out


def _generated_at() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_response(
    req: ItineraryRequest, origin: Coordinates, stops: List[ItineraryStop], settings: Settings
) -> ItineraryResponse:
    if not stops:
        raise NoCandidatesError()

    miles = req.maxDistanceMiles or settings.default_max_distance_miles
    prefs = req.preferences
    spice = prefs.spiceLabel if prefs else None
    near = req.zipCode or f"{origin.lat:.3f}, {origin.lng:.3f}"

    return ItineraryResponse(
        meta=ItineraryMeta(
            zipCode=req.zipCode,
            maxDistanceMiles=miles,
            intents=req.intents or [],
            generatedAt=_generated_at(),
            totalStops=len(stops),
            spiceLabel=spice,
            adventureScore=adventure_score(prefs.adventureScore if prefs else None, spice),
            explain=bool(req.explain),
        ),
        itinerary=ItineraryBody(
            title=f"A day trip near {near}",
            summary=f"{len(stops)} stops within {miles} miles: " + ", then ".join(s.name for s in stops) + ".",
            totalEstimatedHours=total_hours(stops),
            stops=stops,
        ),
    )


async def build_itinerary(
    req: ItineraryRequest, geocoder: GeocodeProvider, places: PlaceSearchProvider, settings: Settings
) -> ItineraryResponse:
    origin = await resolve_origin(req, geocoder, settings)
    miles = req.maxDistanceMiles or settings.default_max_distance_miles
    candidates = await fetch_candidates(origin, miles_to_meters(miles), places, settings)

    stops = assemble_stops(select_stops(candidates), req)
    if req.explain and stops:
        stops = await enrich_rationale(stops, places, settings)

    resp = build_response(req, origin, stops, settings)
    log.info("itinerary: %d stops, %.1fh", len(stops), resp.itinerary.totalEstimatedHours)
    return resp
