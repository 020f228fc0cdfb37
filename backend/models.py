# models.py
# typed request/response models and the Candidate record shared by providers

from pydantic import BaseModel, Field, StrictBool, StrictInt, field_validator
from pydantic_core import PydanticCustomError
from typing import List, Literal, Optional, Union
import re

SpiceLabel = Literal["mild", "medium", "hot"]
StopKind = Literal["coffee", "restaurant", "activity"]

ZIP_RE = re.compile(r"[0-9]{5}")


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90, strict=True)
    lng: float = Field(..., ge=-180, le=180, strict=True)


class Preferences(BaseModel):
    spiceLabel: Optional[SpiceLabel] = None
    # int stays int, float stays float
    adventureScore: Optional[Union[int, float]] = None

    @field_validator("adventureScore", mode="before")
    @classmethod
    def _score_in_range(cls, v):
        if v is None:
            return v
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise PydanticCustomError("adventure_score_type", "adventureScore must be a number")
        if not 1 <= v <= 10:
            raise PydanticCustomError("adventure_score_range", "adventureScore must be between 1 and 10")
        return v


class ItineraryRequest(BaseModel):
    origin: Optional[Coordinates] = None
    zipCode: Optional[str] = None
    maxDistanceMiles: Optional[StrictInt] = Field(None, gt=0, le=100)
    intents: Optional[List[str]] = Field(None, max_length=3)
    preferences: Optional[Preferences] = None
    explain: Optional[StrictBool] = None

    @field_validator("zipCode", mode="before")
    @classmethod
    def _zip_five_digits(cls, v):
        if v is None:
            return v
        if not isinstance(v, str) or not ZIP_RE.fullmatch(v.strip()):
            raise PydanticCustomError("zip_code", "zipCode must be 5 digits")
        return v.strip()


class Candidate(BaseModel):
    """
    One place record from the places directory. Everything is optional at
    parse time; only `eligible` candidates may become stops.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0)
    ratingCount: Optional[int] = Field(None, ge=0)
    types: List[str] = Field(default_factory=list)

    @property
    def eligible(self) -> bool:
        return bool(self.id) and bool(self.name) and self.lat is not None and self.lng is not None


class StopLocation(BaseModel):
    lat: float
    lng: float
    address: Optional[str] = None


class StopLinks(BaseModel):
    googleMapsUrl: Optional[str] = None
    websiteUrl: Optional[str] = None


class ItineraryStop(BaseModel):
    id: str
    order: int
    kind: StopKind
    name: str
    estimatedDurationMinutes: int
    location: StopLocation
    links: Optional[StopLinks] = None
    tags: Optional[List[str]] = None
    rationale: Optional[str] = None


class ItineraryMeta(BaseModel):
    zipCode: Optional[str] = None
    maxDistanceMiles: int
    intents: List[str]
    generatedAt: str
    totalStops: int
    spiceLabel: Optional[SpiceLabel] = None
    adventureScore: Optional[Union[int, float]] = None
    explain: bool = False


class ItineraryBody(BaseModel):
    title: str
    summary: str
    totalEstimatedHours: float
    stops: List[ItineraryStop]


class ItineraryResponse(BaseModel):
    meta: ItineraryMeta
    itinerary: ItineraryBody
