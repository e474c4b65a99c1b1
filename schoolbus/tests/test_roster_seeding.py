"""
Tests for trip roster seeding.
"""
import logging

import pytest

from schoolbus.models import Passenger, PassengerStatus, Trip, TripCounts
from schoolbus.services.roster_seeding import seed_passengers


class TestSeedPassengers:
    """Test suite for seed_passengers."""

    def test_selects_students_by_route_or_bus(self, student_documents, trip, now):
        """Test route and bus assignments both qualify within the school."""
        result = seed_passengers(student_documents, trip, now=now)

        assert [p.student_id for p in result.created] == ["STU001", "STU002", "STU003"]
        assert result.created_count == 3
        assert result.skipped == 0
        assert result.counts == TripCounts(pending=3)

    def test_new_passengers_are_pending(self, student_documents, trip, now):
        """Test seeded records start pending with empty timestamps."""
        result = seed_passengers(student_documents, trip, now=now)

        for passenger in result.created:
            assert passenger.status == PassengerStatus.PENDING
            assert passenger.boarded_at is None
            assert passenger.dropped_at is None
            assert passenger.updated_by == "driver-1"
            assert passenger.updated_at == now
            assert passenger.school_id == "SCH001"
            assert passenger.route_id == "R-NORTH"
            assert passenger.bus_id == "BUS-7"

    def test_first_occurrence_wins(self, student_documents, trip, now):
        """Test duplicate student ids are seeded once."""
        result = seed_passengers(student_documents, trip, now=now)
        ana = [p for p in result.created if p.student_id == "STU001"]
        assert len(ana) == 1
        assert ana[0].name == "Ana"

    def test_idempotent_reseed(self, student_documents, trip, now):
        """Test students already on the trip are skipped."""
        existing = [
            Passenger(student_id="STU001", name="Ana", status=PassengerStatus.BOARDED),
        ]
        result = seed_passengers(student_documents, trip, existing=existing, now=now)

        assert [p.student_id for p in result.created] == ["STU002", "STU003"]
        assert result.skipped == 1
        assert result.counts == TripCounts(pending=2, boarded=1)

    def test_reseed_of_full_roster_creates_nothing(self, student_documents, trip, now):
        """Test seeding twice adds nothing the second time."""
        first = seed_passengers(student_documents, trip, now=now)
        second = seed_passengers(student_documents, trip, existing=first.created, now=now)
        assert second.created == []
        assert second.skipped == 3
        assert second.counts == first.counts

    def test_route_only_trip(self, student_documents, now):
        """Test a trip without a bus only picks route students."""
        trip = Trip(id="TRP002", school_id="SCH001", route_id="R-SOUTH")
        result = seed_passengers(student_documents, trip, now=now)
        assert [p.student_id for p in result.created] == ["STU004"]

    def test_snake_case_documents(self, trip, now):
        """Test student documents using snake_case keys."""
        students = [{"id": "X1", "name": "Xavi", "school_id": "SCH001", "assigned_bus_id": "BUS-7"}]
        result = seed_passengers(students, trip, now=now)
        assert [p.student_id for p in result.created] == ["X1"]

    def test_explicit_actor(self, student_documents, trip, now):
        """Test the seeding actor can be given explicitly."""
        result = seed_passengers(student_documents, trip, actor="admin-9", now=now)
        assert {p.updated_by for p in result.created} == {"admin-9"}

    def test_missing_identifiers(self, student_documents):
        """Test trips without id or school are rejected."""
        with pytest.raises(ValueError):
            seed_passengers(student_documents, Trip(id="", school_id="SCH001", bus_id="BUS-7"))
        with pytest.raises(ValueError):
            seed_passengers(student_documents, Trip(id="TRP001", school_id="", bus_id="BUS-7"))

    def test_no_candidates(self, now):
        """Test a trip with nobody assigned."""
        trip = Trip(id="TRP003", school_id="SCH009", bus_id="BUS-1")
        result = seed_passengers([], trip, now=now)
        assert result.created == []
        assert result.counts.total == 0

    def test_logs_summary(self, student_documents, trip, now, caplog):
        """Test seeding logs a one-line summary."""
        with caplog.at_level(logging.INFO, logger="schoolbus.services.roster_seeding"):
            seed_passengers(student_documents, trip, now=now)
        assert any("Seeded trip TRP001" in r.message for r in caplog.records)
