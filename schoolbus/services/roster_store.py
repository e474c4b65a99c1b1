"""
Trip roster store.

Holds the passengers and aggregate counts of each trip and applies status
changes with a single read-modify-write under a lock, so the passenger
update and its count delta are never observed separately. Optionally
persists to a JSON file, which is enough for tests, demos and single-process
deployments; callers on a real document store reproduce the same contract
with a transaction or compare-and-swap.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from schoolbus.models import Passenger, StatusTransition, TripCounts
from schoolbus.roster_reconciler import apply_status_transition, reconcile_trip_counts

logger = logging.getLogger(__name__)


class RosterStore:
    """Simple thread-safe roster registry, optionally JSON-backed."""

    def __init__(self, storage_path: Optional[Path] = None) -> None:
        self.storage_path = Path(storage_path) if storage_path else None
        self._lock = threading.Lock()
        self._passengers: Dict[str, Dict[str, Passenger]] = {}
        self._counts: Dict[str, TripCounts] = {}
        if self.storage_path is not None:
            self._load()

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------

    def _load(self) -> None:
        try:
            with self.storage_path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return
        except json.JSONDecodeError:
            logger.warning(f"Roster file {self.storage_path} is corrupt, starting empty")
            return
        if not isinstance(data, dict):
            return
        for trip_id, trip in (data.get("trips") or {}).items():
            passengers = [Passenger.model_validate(p) for p in trip.get("passengers", [])]
            self._passengers[trip_id] = {p.student_id: p for p in passengers}
            stored = trip.get("counts")
            self._counts[trip_id] = (
                TripCounts.model_validate(stored) if stored else reconcile_trip_counts(passengers)
            )

    def _save(self) -> None:
        if self.storage_path is None:
            return
        data: Dict[str, Any] = {"version": 1, "trips": {}}
        for trip_id, passengers in self._passengers.items():
            data["trips"][trip_id] = {
                "passengers": [p.model_dump(mode="json") for p in passengers.values()],
                "counts": self._counts[trip_id].as_dict(),
            }
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with self.storage_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def _trip(self, trip_id: str) -> Dict[str, Passenger]:
        if trip_id not in self._passengers:
            raise KeyError(f"Trip not found: {trip_id}")
        return self._passengers[trip_id]

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    # Reads hand out copies; stored records only change through transition().

    def trip_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._passengers)

    def list_passengers(self, trip_id: str) -> List[Passenger]:
        with self._lock:
            return [p.model_copy() for p in self._trip(trip_id).values()]

    def get_passenger(self, trip_id: str, student_id: str) -> Passenger:
        with self._lock:
            passengers = self._trip(trip_id)
            if student_id not in passengers:
                raise KeyError(f"Passenger not found: {trip_id}/{student_id}")
            return passengers[student_id].model_copy()

    def get_counts(self, trip_id: str) -> TripCounts:
        with self._lock:
            self._trip(trip_id)
            return self._counts[trip_id].model_copy()

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    def seed(self, trip_id: str, passengers: Iterable[Passenger]) -> TripCounts:
        """Add passengers to a trip (existing records win) and resync counts."""
        with self._lock:
            roster = self._passengers.setdefault(trip_id, {})
            for passenger in passengers:
                roster.setdefault(passenger.student_id, passenger.model_copy())
            counts = reconcile_trip_counts(roster.values(), stored=self._counts.get(trip_id))
            self._counts[trip_id] = counts
            self._save()
            return counts.model_copy()

    def transition(
        self,
        trip_id: str,
        student_id: str,
        new_status,
        actor: str,
        now: Optional[datetime] = None,
    ) -> StatusTransition:
        """
        Change one passenger's status and apply the count delta atomically.

        The current status is read inside the lock, so concurrent changes to
        the same passenger are serialized and no delta is lost.

        Raises:
            KeyError: Unknown trip or passenger.
            InvalidTransition: Unknown target status.
        """
        with self._lock:
            roster = self._trip(trip_id)
            if student_id not in roster:
                raise KeyError(f"Passenger not found: {trip_id}/{student_id}")

            result = apply_status_transition(
                roster[student_id],
                new_status,
                actor,
                now or datetime.now(timezone.utc),
            )
            if not result.changed:
                return result

            roster[student_id] = result.updated_passenger.model_copy()
            self._counts[trip_id] = self._counts[trip_id].apply_delta(result.count_delta)
            self._save()
            logger.debug(f"Trip {trip_id}: {student_id} {result.count_delta} by {actor}")
            return result

    def resync(self, trip_id: str) -> TripCounts:
        """Replace stored counts with counts recomputed from the roster."""
        with self._lock:
            roster = self._trip(trip_id)
            counts = reconcile_trip_counts(roster.values(), stored=self._counts[trip_id])
            self._counts[trip_id] = counts
            self._save()
            return counts.model_copy()

    def set_counts(self, trip_id: str, counts: TripCounts) -> None:
        """Overwrite stored counts without checking them against the roster."""
        with self._lock:
            self._trip(trip_id)
            self._counts[trip_id] = counts.model_copy()
            self._save()
