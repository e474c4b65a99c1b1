"""
Roster seeding for new trips.

Builds the initial ``pending`` passenger list of a trip from the school's
student directory. Seeding is idempotent: students that already have a
passenger record are left alone, so the flow can be re-run after the
route or bus assignment changes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from schoolbus.models import Passenger, PassengerStatus, Trip, TripCounts
from schoolbus.roster_reconciler import reconcile_trip_counts
from schoolbus.type_defs import StudentDocument

logger = logging.getLogger(__name__)


class SeedResult(BaseModel):
    created: List[Passenger] = Field(default_factory=list, description="New passenger records")
    skipped: int = Field(0, description="Assigned students that already had a record")
    counts: TripCounts = Field(default_factory=TripCounts, description="Counts of the combined roster")

    @property
    def created_count(self) -> int:
        return len(self.created)


def _student_matches_trip(student: StudentDocument, trip: Trip) -> bool:
    if student.get("schoolId", student.get("school_id")) != trip.school_id:
        return False
    route_id = student.get("assignedRouteId", student.get("assigned_route_id"))
    bus_id = student.get("assignedBusId", student.get("assigned_bus_id"))
    by_route = bool(trip.route_id) and route_id == trip.route_id
    by_bus = bool(trip.bus_id) and bus_id == trip.bus_id
    return by_route or by_bus


def seed_passengers(
    students: Iterable[StudentDocument],
    trip: Trip,
    existing: Optional[Iterable[Passenger]] = None,
    actor: Optional[str] = None,
    now: Optional[datetime] = None,
) -> SeedResult:
    """
    Create pending passengers for every student assigned to the trip.

    A student belongs to the trip when it is in the trip's school and is
    assigned to the trip's route or to its bus. Students are de-duplicated
    by id and students already present in ``existing`` are skipped.

    Args:
        students: Student documents (``id``, ``name``, ``schoolId``,
            ``assignedRouteId``, ``assignedBusId``).
        trip: Trip being seeded.
        existing: Passenger records already stored for the trip.
        actor: User credited with the seed; defaults to the trip's driver.
        now: Seed timestamp; defaults to the current UTC time.

    Raises:
        ValueError: The trip has no id or no school id.
    """
    if not trip.id or not trip.school_id:
        raise ValueError("Missing required trip id or school id")

    existing_list = list(existing or [])
    known: Set[str] = {p.student_id for p in existing_list}
    seen: Set[str] = set()
    timestamp = now or datetime.now(timezone.utc)
    updated_by = actor or trip.driver_id

    created: List[Passenger] = []
    skipped = 0
    for student in students:
        student_id = str(student.get("id", "") or "")
        if not student_id or student_id in seen:
            continue
        if not _student_matches_trip(student, trip):
            continue
        seen.add(student_id)

        if student_id in known:
            skipped += 1
            continue

        created.append(
            Passenger(
                student_id=student_id,
                name=str(student.get("name", "") or ""),
                status=PassengerStatus.PENDING,
                boarded_at=None,
                dropped_at=None,
                updated_by=updated_by,
                updated_at=timestamp,
                school_id=trip.school_id,
                route_id=trip.route_id,
                bus_id=trip.bus_id,
            )
        )

    counts = reconcile_trip_counts(existing_list + created)
    logger.info(
        f"Seeded trip {trip.id}: {len(created)} created, {skipped} already present, "
        f"{counts.total} passengers total"
    )
    return SeedResult(created=created, skipped=skipped, counts=counts)
