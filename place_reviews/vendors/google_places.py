"""Client utilities for the Google Places API."""

import logging

import httpx
from pydantic import ValidationError

from place_reviews.models import PlaceDetails, PlaceDetailsResponse

logger = logging.getLogger(__name__)
_BASE_URL = "https://maps.googleapis.com/maps/api/place"
_REVIEW_FIELDS = "name,rating,user_ratings_total,reviews"


class GooglePlacesError(RuntimeError):
    """Raised when the Places API call fails or returns an unusable response."""


async def place_details(client: httpx.AsyncClient, place_id: str, api_key: str) -> PlaceDetails:
    """Fetch name, rating, rating count and reviews for a single place."""
    params = {"place_id": place_id, "fields": _REVIEW_FIELDS, "key": api_key}
    try:
        response = await client.get(f"{_BASE_URL}/details/json", params=params)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as exc:
        raise GooglePlacesError(f"place_details request failed for {place_id}: {exc}") from exc
    except ValueError as exc:
        raise GooglePlacesError(f"place_details returned a non-JSON body for {place_id}") from exc

    try:
        details = PlaceDetailsResponse.model_validate(payload)
    except ValidationError as exc:
        logger.debug("Rejected Places payload for %s: %s", place_id, exc)
        raise GooglePlacesError(f"Invalid API response for {place_id}: {exc.error_count()} validation error(s)") from exc

    if details.status not in (None, "OK"):
        logger.error("place_details failed: status=%s, error_message=%s", details.status, details.error_message)
        raise GooglePlacesError(f"place_details failed for {place_id}: {details.error_message or details.status}")
    if details.result is None:
        raise GooglePlacesError(f"Invalid API response for {place_id}: missing result")
    return details.result
