import math

import pytest

from itinerary_api.errors import ValidationError
from itinerary_api.geo import filter_activities, haversine_miles, within_criteria
from itinerary_api.schemas import Activity, Hotel, Preferences


HOTEL = Hotel(name="Harbor Inn", lat=40.0, lng=-74.0, city="Hoboken")


def _activity(name="Pier Walk", lat=40.001, lng=-74.001, price=10.0):
    return Activity(name=name, type="outdoor", price=price, rating=4.5, lat=lat, lng=lng)


@pytest.mark.parametrize(
    "a, b",
    [
        ((40.0, -74.0), (40.001, -74.001)),
        ((51.5074, -0.1278), (48.8566, 2.3522)),
        ((-33.8688, 151.2093), (35.6762, 139.6503)),
    ],
)
def test_distance_is_symmetric(a, b):
    assert haversine_miles(*a, *b) == pytest.approx(haversine_miles(*b, *a))


def test_distance_to_self_is_zero():
    assert haversine_miles(40.0, -74.0, 40.0, -74.0) == 0.0


def test_distance_london_paris():
    # ~213 miles great-circle
    assert haversine_miles(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(213.5, abs=1.0)


def test_non_finite_coordinates_rejected():
    with pytest.raises(ValidationError):
        haversine_miles(math.nan, -74.0, 40.0, -74.0)
    with pytest.raises(ValidationError):
        haversine_miles(40.0, math.inf, 40.0, -74.0)


def test_admits_only_when_both_conditions_hold():
    prefs = Preferences(budget=50, maxDistance=5, duration="Full Day")
    near_cheap = _activity()
    near_pricey = _activity(price=80.0)
    far_cheap = _activity(lat=41.0, lng=-74.0)
    far_pricey = _activity(lat=41.0, lng=-74.0, price=80.0)

    assert within_criteria(HOTEL, near_cheap, prefs) is True
    assert within_criteria(HOTEL, near_pricey, prefs) is False
    assert within_criteria(HOTEL, far_cheap, prefs) is False
    assert within_criteria(HOTEL, far_pricey, prefs) is False


def test_missing_price_counts_as_free():
    prefs = Preferences(budget=0, maxDistance=5)
    assert within_criteria(HOTEL, _activity(price=None), prefs) is True


def test_limits_are_inclusive():
    at_budget = _activity(price=50.0)
    assert within_criteria(HOTEL, at_budget, Preferences(budget=50, maxDistance=5)) is True
    assert within_criteria(HOTEL, _activity(lat=40.0, lng=-74.0), Preferences(budget=50, maxDistance=0)) is True


def test_filter_keeps_input_order():
    prefs = Preferences(budget=50, maxDistance=5)
    acts = [
        _activity(name="B"),
        _activity(name="Far", lat=45.0),
        _activity(name="A"),
    ]
    assert [a.name for a in filter_activities(HOTEL, acts, prefs)] == ["B", "A"]


def test_non_finite_origin_rejected_without_candidates():
    hotel = Hotel.model_construct(name="Nowhere", lat=math.nan, lng=-74.0, city=None)
    with pytest.raises(ValidationError):
        filter_activities(hotel, [], Preferences(budget=50, maxDistance=5))


def test_request_models_refuse_non_finite_coordinates():
    from pydantic import ValidationError as ModelValidationError

    with pytest.raises(ModelValidationError):
        Hotel(name="Nowhere", lat=math.inf, lng=-74.0)
    with pytest.raises(ModelValidationError):
        _activity(lat=math.nan)
