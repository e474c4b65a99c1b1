"""
Route Optimizer - pickup ordering for a single school bus route
===============================================================

Orders student pickup points farthest-first relative to the school: the bus
starts at the most distant pickup, works inward and ends at the school.
This is a deliberately simple heuristic, not a shortest-path solver.

All functions are pure. Distances are great-circle (haversine) kilometers.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from schoolbus.config import config
from schoolbus.models import (
    DriverLocation,
    OptimizedStop,
    PassengerStatus,
    RouteStatistics,
    SchoolLocation,
    StudentLocation,
)

logger = logging.getLogger(__name__)

# ============================================================
# CONFIGURATION
# ============================================================

EARTH_RADIUS_KM: float = config.EARTH_RADIUS_KM
AVERAGE_SPEED_KMH: float = config.AVERAGE_SPEED_KMH
DISTANCE_DECIMALS: int = config.DISTANCE_DECIMALS

_COMPLETED_STATUSES = (PassengerStatus.BOARDED, PassengerStatus.DROPPED)


# ============================================================
# UTILITY FUNCTIONS
# ============================================================

def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance in km between two coordinates using haversine formula."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) * math.sin(dlat / 2) + \
        math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * \
        math.sin(dlon / 2) * math.sin(dlon / 2)
    # Rounding can push a just outside [0, 1] for near-antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def coords_valid(lat: Optional[float], lon: Optional[float]) -> bool:
    """Check that coordinates are finite and inside the lat/lon ranges."""
    if lat is None or lon is None:
        return False
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def estimate_travel_minutes(distance_km: float, average_speed_kmh: Optional[float] = None) -> float:
    """Travel time in (fractional) minutes at a constant average speed."""
    speed = AVERAGE_SPEED_KMH if average_speed_kmh is None else average_speed_kmh
    if speed <= 0:
        raise ValueError(f"average_speed_kmh must be positive, got {speed}")
    return (distance_km / speed) * 60


def _valid_students(students: Sequence[StudentLocation]) -> List[StudentLocation]:
    valid = []
    for student in students:
        if coords_valid(student.latitude, student.longitude):
            valid.append(student)
        else:
            logger.warning(
                "Skipping student %s (%s): invalid coordinates (%s, %s)",
                student.id, student.name, student.latitude, student.longitude,
            )
    return valid


def _order_by_distance(
    students: Sequence[StudentLocation],
    school: SchoolLocation,
) -> List[Tuple[StudentLocation, float]]:
    with_distance = [
        (
            student,
            haversine_km(school.latitude, school.longitude, student.latitude, student.longitude),
        )
        for student in _valid_students(students)
    ]
    # Stable sort: equal distances keep their input order.
    return sorted(with_distance, key=lambda item: -item[1])


# ============================================================
# ROUTE ORDERING
# ============================================================

def optimize_route(
    students: Sequence[StudentLocation],
    school: SchoolLocation,
) -> List[OptimizedStop]:
    """
    Order pickup points from farthest to nearest to the school.

    Students with missing or non-finite coordinates are skipped (and
    logged). Ties keep their input order. The first stop has
    ``distance_from_previous == 0``; every later stop holds the leg from the
    stop before it.

    Args:
        students: Pickup points to visit.
        school: Route destination.

    Returns:
        Stops with 1-based ``order``, farthest first.
    """
    ordered = _order_by_distance(students, school)

    stops: List[OptimizedStop] = []
    previous: Optional[StudentLocation] = None
    for index, (student, distance_from_school) in enumerate(ordered):
        if previous is None:
            leg = 0.0
        else:
            leg = haversine_km(previous.latitude, previous.longitude, student.latitude, student.longitude)
        stops.append(
            OptimizedStop(
                student=student,
                order=index + 1,
                distance_from_school=distance_from_school,
                distance_from_previous=leg,
            )
        )
        previous = student

    return stops


def optimize_route_with_driver(
    students: Sequence[StudentLocation],
    driver: DriverLocation,
    school: SchoolLocation,
) -> List[OptimizedStop]:
    """
    Farthest-first order annotated with the driver's current position.

    The visiting order is the same as ``optimize_route``. The first stop's
    ``distance_from_previous`` is the leg from the driver to that stop.
    """
    if not coords_valid(driver.latitude, driver.longitude):
        logger.warning(
            "Driver location (%s, %s) is invalid, ignoring it",
            driver.latitude, driver.longitude,
        )
        return optimize_route(students, school)

    stops = optimize_route(students, school)
    for stop in stops:
        stop.distance_from_driver = haversine_km(
            driver.latitude, driver.longitude,
            stop.student.latitude, stop.student.longitude,
        )
    if stops:
        stops[0].distance_from_previous = stops[0].distance_from_driver
    return stops


# ============================================================
# NAVIGATION
# ============================================================

def get_current_stop(stops: Sequence[OptimizedStop], current_index: int) -> Optional[OptimizedStop]:
    if 0 <= current_index < len(stops):
        return stops[current_index]
    return None


def get_next_stop(stops: Sequence[OptimizedStop], current_index: int) -> Optional[OptimizedStop]:
    """Stop after ``current_index``, or None when out of range."""
    if current_index < 0:
        return None
    return get_current_stop(stops, current_index + 1)


# ============================================================
# STATISTICS
# ============================================================

def calculate_total_distance(stops: Sequence[OptimizedStop]) -> float:
    """Sum of all legs plus the return leg from the last stop to school."""
    if not stops:
        return 0.0
    return sum(stop.distance_from_previous for stop in stops) + stops[-1].distance_from_school


def calculate_total_distance_with_driver(
    stops: Sequence[OptimizedStop],
    driver: DriverLocation,
    school: SchoolLocation,
) -> float:
    """Driver -> every stop in order -> school."""
    if not stops:
        return 0.0

    total = 0.0
    current_lat, current_lon = driver.latitude, driver.longitude
    for stop in stops:
        total += haversine_km(current_lat, current_lon, stop.student.latitude, stop.student.longitude)
        current_lat, current_lon = stop.student.latitude, stop.student.longitude

    total += haversine_km(current_lat, current_lon, school.latitude, school.longitude)
    return total


def _build_statistics(
    stops: Sequence[OptimizedStop],
    total_distance: float,
    average_speed_kmh: Optional[float],
) -> RouteStatistics:
    estimated = estimate_travel_minutes(total_distance, average_speed_kmh)
    statuses = [stop.student.status for stop in stops]
    return RouteStatistics(
        total_distance=round(total_distance, DISTANCE_DECIMALS),
        estimated_time=int(math.floor(estimated + 0.5)),
        total_stops=len(stops),
        completed_stops=sum(1 for s in statuses if s in _COMPLETED_STATUSES),
        pending_stops=sum(1 for s in statuses if s == PassengerStatus.PENDING),
        absent_stops=sum(1 for s in statuses if s == PassengerStatus.ABSENT),
    )


def get_route_statistics(
    stops: Sequence[OptimizedStop],
    average_speed_kmh: Optional[float] = None,
) -> RouteStatistics:
    """
    Summary statistics for an optimized route.

    ``total_distance`` includes the return leg to school and is rounded to
    ``DISTANCE_DECIMALS``; ``estimated_time`` is computed from the unrounded
    distance and rounded to whole minutes.
    """
    return _build_statistics(stops, calculate_total_distance(stops), average_speed_kmh)


def get_route_statistics_with_driver(
    stops: Sequence[OptimizedStop],
    driver: DriverLocation,
    school: SchoolLocation,
    average_speed_kmh: Optional[float] = None,
) -> RouteStatistics:
    total = calculate_total_distance_with_driver(stops, driver, school)
    return _build_statistics(stops, total, average_speed_kmh)
