"""Utilities for transforming Places Details results into cached review artifacts."""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from place_reviews.models import CachedResult, Client, PlaceDetails, Review

logger = logging.getLogger(__name__)

MAX_REVIEWS = 5
DEFAULT_BUSINESS_TYPE = "LocalBusiness"


def normalize_rating(rating: Optional[float]) -> Optional[float]:
    """Round to one decimal place, halves away from zero (4.45 -> 4.5)."""
    if rating is None:
        return None
    return float(Decimal(str(rating)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def select_top_reviews(reviews: Iterable[Review], limit: int = MAX_REVIEWS) -> List[Review]:
    ordered = sorted(reviews, key=lambda review: (review.rating, review.time), reverse=True)
    return ordered[:limit]


def build_markup(client: Client, rating: Optional[float], total_ratings: int) -> Dict[str, Any]:
    """Build the schema.org JSON-LD object for a client and its aggregate rating."""
    markup: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": client.business_type or DEFAULT_BUSINESS_TYPE,
        "@id": client.url,
        "name": client.name,
        "url": client.url,
        "telephone": client.phone,
    }
    if client.price_range is not None:
        markup["priceRange"] = client.price_range

    markup["address"] = {
        "@type": "PostalAddress",
        "streetAddress": client.address.street,
        "addressLocality": client.address.city,
        "addressRegion": client.address.state,
        "postalCode": client.address.postal_code,
        "addressCountry": client.address.country,
    }
    markup["geo"] = {
        "@type": "GeoCoordinates",
        "latitude": client.geo.lat,
        "longitude": client.geo.lng,
    }
    markup["aggregateRating"] = {
        "@type": "AggregateRating",
        "ratingValue": rating,
        "reviewCount": total_ratings,
    }
    return markup


def build_result(client: Client, details: PlaceDetails, now: Optional[datetime] = None) -> CachedResult:
    rating = normalize_rating(details.rating)
    reviews = select_top_reviews(details.reviews)
    logger.debug("Selected %d of %d reviews for %s", len(reviews), len(details.reviews), client.slug)

    return CachedResult(
        name=details.name,
        rating=rating,
        total_ratings=details.user_ratings_total,
        reviews=reviews,
        markup=build_markup(client, rating, details.user_ratings_total),
        last_updated=now or datetime.now(timezone.utc),
    )
