from datetime import datetime
from enum import Enum
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, computed_field


class PassengerStatus(str, Enum):
    """Status of a student within one trip."""

    PENDING = "pending"
    BOARDED = "boarded"
    ABSENT = "absent"
    DROPPED = "dropped"


STATUS_VALUES: List[str] = [status.value for status in PassengerStatus]


# ============================================================
# ROUTE MODELS
# ============================================================

class StudentLocation(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    status: PassengerStatus = PassengerStatus.PENDING
    photo_url: Optional[str] = None


class SchoolLocation(BaseModel):
    latitude: float
    longitude: float


class DriverLocation(BaseModel):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None  # meters
    speed: Optional[float] = None
    heading: Optional[float] = None
    timestamp: Optional[datetime] = None


class OptimizedStop(BaseModel):
    """
    One pickup point in a computed visiting order.
    """

    student: StudentLocation
    order: int = Field(..., ge=1, description="1-based position in the route")
    distance_from_school: float = Field(..., description="Distance to school (km)")
    distance_from_previous: float = Field(0.0, description="Distance from the previous stop (km)")
    distance_from_driver: Optional[float] = Field(
        None, description="Distance from the driver position (km)"
    )


class RouteStatistics(BaseModel):
    """
    Summary of an optimized route.
    """

    total_distance: float = Field(0.0, description="Total distance including the return leg to school (km)")
    estimated_time: int = Field(0, description="Estimated time in minutes")
    total_stops: int = Field(0, description="Number of stops")
    completed_stops: int = Field(0, description="Stops whose student boarded or was dropped")
    pending_stops: int = Field(0, description="Stops still pending")
    absent_stops: int = Field(0, description="Stops whose student is absent")

    def to_dict(self) -> dict:
        return self.model_dump()


# ============================================================
# ROSTER MODELS
# ============================================================

class Passenger(BaseModel):
    student_id: str
    name: str = ""
    status: PassengerStatus = PassengerStatus.PENDING
    boarded_at: Optional[datetime] = None
    dropped_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    school_id: Optional[str] = None
    route_id: Optional[str] = None
    bus_id: Optional[str] = None


class TripCounts(BaseModel):
    boarded: int = 0
    dropped: int = 0
    absent: int = 0
    pending: int = 0

    @computed_field
    @property
    def total(self) -> int:
        return self.boarded + self.dropped + self.absent + self.pending

    def as_dict(self) -> Dict[str, int]:
        """Counts keyed by status value, without the computed total."""
        return {value: getattr(self, value) for value in STATUS_VALUES}

    def apply_delta(self, delta: Mapping[str, int]) -> "TripCounts":
        """Return new counts with ``delta`` added; unknown keys raise KeyError."""
        counts = self.as_dict()
        for key, amount in delta.items():
            key = key.value if isinstance(key, PassengerStatus) else key
            if key not in counts:
                raise KeyError(f"Unknown count key: {key}")
            counts[key] += amount
        return TripCounts(**counts)


class StatusTransition(BaseModel):
    """
    Result of a single passenger status change.

    ``count_delta`` only holds non-zero entries and must be applied to the
    stored trip counts in the same atomic write as ``updated_passenger``.
    """

    updated_passenger: Passenger
    count_delta: Dict[str, int] = Field(default_factory=dict)
    changed: bool = False

    @property
    def previous_status(self) -> Optional[PassengerStatus]:
        for key, amount in self.count_delta.items():
            if amount < 0:
                return PassengerStatus(key)
        return None


class Trip(BaseModel):
    """One bus run: a driver, a bus, an optional route and a roster."""

    id: str
    school_id: str
    driver_id: Optional[str] = None
    bus_id: Optional[str] = None
    route_id: Optional[str] = None
