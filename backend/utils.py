# utils.py
# Helpers: deterministic ranking/selection, dedupe, unit conversion, neighborhood labels

from __future__ import annotations
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional
from urllib.parse import quote
from models import Candidate, ItineraryStop

METERS_PER_MILE = 1609.344

MAPS_PLACE_URL = "https://maps.google.com/maps/place/?q=place_id:{}"

# address component types, most specific first
NEIGHBORHOOD_TYPES = ("neighborhood", "sublocality", "locality", "administrative_area_level_2")

SPICE_TO_ADVENTURE = {"mild": 2, "medium": 6, "hot": 9}


def miles_to_meters(miles: float) -> int:
    """30 miles -> 48280 meters."""
    return int(round(miles * METERS_PER_MILE))


def total_hours(stops: Iterable[ItineraryStop]) -> float:
    """Halves round up: 195 min -> 3.3h."""
    minutes = sum(s.estimatedDurationMinutes for s in stops)
    hours = (Decimal(minutes) / 60).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(hours)


def maps_url(place_id: str) -> str:
    return MAPS_PLACE_URL.format(quote(place_id, safe=""))


def adventure_score(score: Optional[float], spice_label: Optional[str]) -> Optional[float]:
    """Explicit score wins; otherwise derive one from the spice label."""
    if score is not None:
        return score
    if spice_label:
        return SPICE_TO_ADVENTURE.get(spice_label)
    return None


def dedupe(items: List[Candidate]) -> List[Candidate]:
    """Deduplicate by place id, first occurrence wins."""
    seen = set()
    out: List[Candidate] = []
    for it in items:
        if it.id not in seen:
            seen.add(it.id)
            out.append(it)
    return out


def rank(items: List[Candidate]) -> List[Candidate]:
    """
    Drop candidates missing id/name/coordinates, then order by
      rating desc, rating count desc (missing -> 0)
    sorted() is stable so remaining ties keep input order.
    """
    eligible = [it for it in items if it.eligible]
    return sorted(eligible, key=lambda it: (-(it.rating or 0), -(it.ratingCount or 0)))


def select(items: List[Candidate], limit: int, exclude: Optional[set] = None) -> List[Candidate]:
    """Top `limit` ranked candidates whose id is not already taken."""
    exclude = exclude or set()
    out: List[Candidate] = []
    for it in dedupe(rank(items)):
        if len(out) >= limit:
            break
        if it.id in exclude:
            continue
        out.append(it)
    return out


def neighborhood_label(components: List[dict]) -> Optional[str]:
    """
    Pick a neighborhood-ish label from address components. Types are tried in
    NEIGHBORHOOD_TYPES order; the first component carrying the type wins and
    its long text is preferred over the short text. Accepts both the Places
    (New) shape (longText/shortText) and the legacy one (long_name/short_name).
    """
    for wanted in NEIGHBORHOOD_TYPES:
        for c in components or []:
            if wanted not in (c.get("types") or []):
                continue
            text = c.get("longText") or c.get("long_name") or c.get("shortText") or c.get("short_name")
            if text:
                return text
            break
    return None
