"""Driving distance from the home base to an event.

The Distance Matrix API gives real driving miles. When it is unavailable
(no key, timeout, HTTP error, a non-OK status or a missing field) the
resolver returns the straight-line distance times 1.4 instead. It never
raises.
"""

import logging
import math
from typing import NamedTuple

import requests


logger = logging.getLogger(__name__)

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
EARTH_RADIUS_MILES = 3959
DRIVING_DISTANCE_FACTOR = 1.4
METERS_PER_MILE = 1609.34
LOOKUP_TIMEOUT_SECONDS = 5

SOURCE_DRIVING = "driving"
SOURCE_FALLBACK = "fallback"


class DistanceEstimate(NamedTuple):
    miles: float
    source: str

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK


def haversine_miles(origin, destination) -> float:
    """Great-circle distance in miles between two points with .lat/.lng."""
    lat1 = math.radians(origin.lat)
    lat2 = math.radians(destination.lat)
    dlat = lat2 - lat1
    dlng = math.radians(destination.lng - origin.lng)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def fallback_driving_miles(origin, destination) -> float:
    """Approximate driving miles: straight line x 1.4."""
    return haversine_miles(origin, destination) * DRIVING_DISTANCE_FACTOR


def _driving_miles_from_response(data):
    if data["status"] != "OK":
        raise ValueError(f"Distance Matrix status {data['status']}")
    element = data["rows"][0]["elements"][0]
    if element["status"] != "OK":
        raise ValueError(f"Distance Matrix element status {element['status']}")
    meters = element["distance"]["value"]
    if not meters or meters <= 0:
        raise ValueError("Distance Matrix returned no distance")
    return meters / METERS_PER_MILE


def resolve_driving_distance(origin, destination, api_key=None, session=None,
                             timeout=LOOKUP_TIMEOUT_SECONDS) -> DistanceEstimate:
    """
    Best-effort driving distance in miles.

    One Distance Matrix request bounded by ``timeout`` seconds; any failure
    returns the 1.4x straight-line fallback. Callers that fire several
    lookups for the same event keep only the latest result.
    """
    fallback = fallback_driving_miles(origin, destination)

    if not api_key:
        logger.warning("No Distance Matrix API key, using straight-line approximation %.2f mi", fallback)
        return DistanceEstimate(fallback, SOURCE_FALLBACK)

    http = session or requests
    params = {
        "origins": str(origin),
        "destinations": str(destination),
        "mode": "driving",
        "units": "imperial",
        "key": api_key,
    }
    try:
        response = http.get(DISTANCE_MATRIX_URL, params=params, timeout=timeout)
        response.raise_for_status()
        miles = _driving_miles_from_response(response.json())
    except requests.RequestException as exc:
        logger.warning("Distance Matrix request failed (%s), using fallback %.2f mi", exc, fallback)
        return DistanceEstimate(fallback, SOURCE_FALLBACK)
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        logger.warning("Distance Matrix response unusable (%s), using fallback %.2f mi", exc, fallback)
        return DistanceEstimate(fallback, SOURCE_FALLBACK)

    logger.info("Driving distance %.2f mi", miles)
    return DistanceEstimate(miles, SOURCE_DRIVING)
