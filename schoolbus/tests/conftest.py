"""
Pytest configuration and shared fixtures for school bus core tests.
"""
import pytest
import os
import sys
from datetime import datetime, timezone
from typing import List

# Add repository root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from schoolbus.models import (
    DriverLocation,
    Passenger,
    PassengerStatus,
    SchoolLocation,
    StudentLocation,
    Trip,
)


# ============================================================
# FIXTURES FOR LOCATIONS
# ============================================================

@pytest.fixture
def school_at_origin() -> SchoolLocation:
    """School placed at (0, 0) so distances are easy to reason about."""
    return SchoolLocation(latitude=0.0, longitude=0.0)


@pytest.fixture
def equator_students() -> List[StudentLocation]:
    """A (0,1) and C (1,0) are equidistant from the origin, B (0,0.1) is near."""
    return [
        StudentLocation(id="A", name="Ana", latitude=0.0, longitude=1.0),
        StudentLocation(id="B", name="Bruno", latitude=0.0, longitude=0.1),
        StudentLocation(id="C", name="Carla", latitude=1.0, longitude=0.0),
    ]


@pytest.fixture
def city_school() -> SchoolLocation:
    return SchoolLocation(latitude=42.2500, longitude=-8.7300)


@pytest.fixture
def city_students() -> List[StudentLocation]:
    """Pickup points scattered around the city school."""
    return [
        StudentLocation(id="S1", name="Student 1", latitude=42.2400, longitude=-8.7200),
        StudentLocation(id="S2", name="Student 2", latitude=42.2100, longitude=-8.7600),
        StudentLocation(id="S3", name="Student 3", latitude=42.2480, longitude=-8.7310),
        StudentLocation(id="S4", name="Student 4", latitude=42.2700, longitude=-8.6900),
        StudentLocation(id="S5", name="Student 5", latitude=42.2300, longitude=-8.7000),
    ]


@pytest.fixture
def driver_east() -> DriverLocation:
    return DriverLocation(latitude=0.0, longitude=2.0)


# ============================================================
# FIXTURES FOR ROSTERS
# ============================================================

@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 10, 7, 45, tzinfo=timezone.utc)


@pytest.fixture
def later() -> datetime:
    return datetime(2025, 3, 10, 8, 20, tzinfo=timezone.utc)


@pytest.fixture
def pending_passenger(now) -> Passenger:
    return Passenger(
        student_id="STU001",
        name="Ana",
        status=PassengerStatus.PENDING,
        updated_by="driver-1",
        updated_at=now,
    )


@pytest.fixture
def roster(now) -> List[Passenger]:
    """Ten pending passengers for one trip."""
    return [
        Passenger(student_id=f"STU{i:03d}", name=f"Student {i}", updated_by="driver-1", updated_at=now)
        for i in range(10)
    ]


@pytest.fixture
def trip() -> Trip:
    return Trip(id="TRP001", school_id="SCH001", driver_id="driver-1", bus_id="BUS-7", route_id="R-NORTH")


@pytest.fixture
def student_documents() -> List[dict]:
    """Student directory as read from the document store."""
    return [
        {"id": "STU001", "name": "Ana", "schoolId": "SCH001", "assignedRouteId": "R-NORTH"},
        {"id": "STU002", "name": "Bruno", "schoolId": "SCH001", "assignedBusId": "BUS-7"},
        {
            "id": "STU003",
            "name": "Carla",
            "schoolId": "SCH001",
            "assignedRouteId": "R-NORTH",
            "assignedBusId": "BUS-7",
        },
        {"id": "STU004", "name": "Diego", "schoolId": "SCH001", "assignedRouteId": "R-SOUTH"},
        {"id": "STU005", "name": "Elena", "schoolId": "SCH002", "assignedRouteId": "R-NORTH"},
        {"id": "STU001", "name": "Ana (duplicate)", "schoolId": "SCH001", "assignedBusId": "BUS-7"},
    ]
