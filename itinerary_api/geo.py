import math
from typing import List

from .errors import ValidationError
from .schemas import Activity, Hotel, Preferences


EARTH_RADIUS_MILES = 3959.0


def _require_finite(*values: float) -> None:
    for value in values:
        if not math.isfinite(value):
            raise ValidationError(f"Coordinates must be finite numbers, got {value!r}")


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles between two points given in degrees."""
    _require_finite(lat1, lon1, lat2, lon2)

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def within_criteria(hotel: Hotel, activity: Activity, preferences: Preferences) -> bool:
    distance = haversine_miles(hotel.lat, hotel.lng, activity.lat, activity.lng)
    price = activity.price or 0
    return distance <= preferences.maxDistance and price <= preferences.budget


def filter_activities(hotel: Hotel, activities: List[Activity], preferences: Preferences) -> List[Activity]:
    _require_finite(hotel.lat, hotel.lng)
    # Input order is preserved; the prompt lists candidates as given.
    return [a for a in activities if within_criteria(hotel, a, preferences)]
