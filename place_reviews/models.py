"""Core data models shared by the review refresh pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Address(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    street: str
    city: str
    state: str
    postal_code: str = Field(alias="postalCode")
    country: str


class Geo(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class Client(BaseModel):
    """A business whose Google reviews are refreshed, as listed in clients.json."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    slug: str = Field(pattern=r"^[A-Za-z0-9_-]+$")
    place_id: str = Field(alias="placeId", min_length=1)
    business_type: Optional[str] = Field(default=None, alias="type")
    name: str
    url: str
    phone: str
    price_range: Optional[str] = Field(default=None, alias="priceRange")
    address: Address
    geo: Geo


class Review(BaseModel):
    """A single Google review; fields other than rating and time pass through untouched."""

    model_config = ConfigDict(extra="allow")

    rating: Union[int, float]
    time: int


class PlaceDetails(BaseModel):
    """The `result` object of a Places Details response limited to review fields."""

    name: str
    rating: Optional[float] = None
    user_ratings_total: int = 0
    reviews: List[Review] = Field(default_factory=list)


class PlaceDetailsResponse(BaseModel):
    status: Optional[str] = None
    error_message: Optional[str] = None
    result: Optional[PlaceDetails] = None


class CachedResult(BaseModel):
    """Contents of data/<slug>.json; keys are camelCase on disk."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    rating: Optional[float] = None
    total_ratings: int = Field(alias="totalRatings")
    reviews: List[Review] = Field(default_factory=list)
    markup: Dict[str, Any] = Field(alias="schema")
    last_updated: datetime = Field(alias="lastUpdated")

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
