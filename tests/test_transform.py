from datetime import datetime, timezone

import pytest

from place_reviews.etl import transform
from place_reviews.models import Client, PlaceDetails, Review


def make_client(**overrides):
    data = {
        "slug": "acme-dental",
        "placeId": "pid-1",
        "type": "Dentist",
        "name": "Acme Dental",
        "url": "https://acme.example",
        "phone": "+1 555 0100",
        "priceRange": "$$",
        "address": {
            "street": "1 Main St",
            "city": "Gotham",
            "state": "NY",
            "postalCode": "10001",
            "country": "US",
        },
        "geo": {"lat": 40.7, "lng": -74.0},
    }
    data.update(overrides)
    return Client.model_validate(data)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(4.567, 4.6), (4.0, 4.0), (3.04, 3.0), (4.45, 4.5), (5, 5.0), (None, None)],
)
def test_normalize_rating(raw, expected):
    assert transform.normalize_rating(raw) == expected


def test_select_top_reviews_orders_by_rating_then_recency():
    reviews = [
        Review(rating=5, time=100),
        Review(rating=5, time=200),
        Review(rating=3, time=300),
    ]

    ordered = transform.select_top_reviews(reviews)

    assert [(r.rating, r.time) for r in ordered] == [(5, 200), (5, 100), (3, 300)]
    assert [(r.rating, r.time) for r in reviews] == [(5, 100), (5, 200), (3, 300)]


def test_select_top_reviews_truncates_to_five():
    reviews = [Review(rating=r % 5 + 1, time=r) for r in range(12)]

    ordered = transform.select_top_reviews(reviews)

    assert len(ordered) == 5
    assert [(r.rating, r.time) for r in ordered] == [(5, 9), (5, 4), (4, 8), (4, 3), (3, 7)]


def test_build_markup_uses_client_metadata():
    markup = transform.build_markup(make_client(), 4.6, 120)

    assert markup["@context"] == "https://schema.org"
    assert markup["@type"] == "Dentist"
    assert markup["@id"] == "https://acme.example"
    assert markup["telephone"] == "+1 555 0100"
    assert markup["priceRange"] == "$$"
    assert markup["address"]["addressRegion"] == "NY"
    assert markup["address"]["postalCode"] == "10001"
    assert markup["geo"] == {"@type": "GeoCoordinates", "latitude": 40.7, "longitude": -74.0}
    assert markup["aggregateRating"] == {"@type": "AggregateRating", "ratingValue": 4.6, "reviewCount": 120}


def test_build_markup_defaults_type_and_omits_price_range():
    client = make_client(type=None, priceRange=None)

    first = transform.build_markup(client, 4.0, 3)
    second = transform.build_markup(client, 4.0, 3)

    assert first == second
    assert first["@type"] == "LocalBusiness"
    assert "priceRange" not in first


def test_build_result_assembles_artifact():
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    details = PlaceDetails(
        name="Acme Dental",
        rating=4.567,
        user_ratings_total=42,
        reviews=[
            {"rating": 4, "time": 10, "author_name": "Ann", "text": "Good"},
            {"rating": 5, "time": 5, "author_name": "Bob", "text": "Great"},
        ],
    )

    result = transform.build_result(make_client(), details, now=now)
    payload = result.to_json_dict()

    assert payload["name"] == "Acme Dental"
    assert payload["rating"] == 4.6
    assert payload["totalRatings"] == 42
    assert [r["author_name"] for r in payload["reviews"]] == ["Bob", "Ann"]
    assert payload["schema"]["aggregateRating"]["ratingValue"] == 4.6
    assert payload["lastUpdated"].startswith("2026-10-19T12:00:00")
