"""
School bus core: pickup ordering and passenger roster reconciliation.
"""

from schoolbus.exceptions import InvalidTransition, SchoolBusError
from schoolbus.models import (
    DriverLocation,
    OptimizedStop,
    Passenger,
    PassengerStatus,
    RouteStatistics,
    SchoolLocation,
    StatusTransition,
    StudentLocation,
    Trip,
    TripCounts,
)
from schoolbus.roster_reconciler import (
    apply_status_transition,
    compute_counts,
    reconcile_trip_counts,
)
from schoolbus.route_optimizer import get_next_stop, get_route_statistics, optimize_route

__version__ = "0.1.0"

__all__ = [
    "DriverLocation",
    "InvalidTransition",
    "OptimizedStop",
    "Passenger",
    "PassengerStatus",
    "RouteStatistics",
    "SchoolBusError",
    "SchoolLocation",
    "StatusTransition",
    "StudentLocation",
    "Trip",
    "TripCounts",
    "apply_status_transition",
    "compute_counts",
    "get_next_stop",
    "get_route_statistics",
    "optimize_route",
    "reconcile_trip_counts",
]
