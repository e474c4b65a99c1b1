"""
Roster reconciliation for trip passenger counts.

Keeps the aggregate ``TripCounts`` of a trip consistent with the status of
each individual passenger:

- ``compute_counts`` / ``reconcile_trip_counts`` fold the full roster into
  counts (ground truth, used for seeding and drift correction).
- ``apply_status_transition`` computes a single passenger change together
  with the count delta the caller must commit in the same atomic write.

Nothing here performs I/O; persistence and serialization of concurrent
writes belong to the caller's storage layer.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, Mapping, Optional, Union

from schoolbus.exceptions import InvalidTransition
from schoolbus.models import STATUS_VALUES, Passenger, PassengerStatus, StatusTransition, TripCounts
from schoolbus.type_defs import ActorId, CountDelta, PassengerDocument

logger = logging.getLogger(__name__)

PassengerLike = Union[Passenger, PassengerDocument]


def parse_status(value) -> PassengerStatus:
    """Normalize an enum member or string to ``PassengerStatus``."""
    if isinstance(value, PassengerStatus):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in STATUS_VALUES:
            return PassengerStatus(normalized)
    raise InvalidTransition(value)


def _status_of(passenger: PassengerLike) -> PassengerStatus:
    if isinstance(passenger, Passenger):
        return passenger.status
    raw = passenger.get("status")
    if raw is None or raw == "":
        return PassengerStatus.PENDING
    return parse_status(raw)


def compute_counts(passengers: Iterable[PassengerLike]) -> TripCounts:
    """
    Count passengers by status.

    Accepts ``Passenger`` models or raw documents; a document without a
    status counts as ``pending``. An unrecognized status raises
    ``InvalidTransition`` rather than being dropped from the total.
    """
    tally = Counter(_status_of(p).value for p in passengers)
    return TripCounts(**{value: tally.get(value, 0) for value in STATUS_VALUES})


def counts_drift(stored: TripCounts, passengers: Iterable[PassengerLike]) -> CountDelta:
    """Per-status difference ``actual - stored``; empty when consistent."""
    actual = compute_counts(passengers).as_dict()
    expected = stored.as_dict()
    return {
        key: actual[key] - expected[key]
        for key in STATUS_VALUES
        if actual[key] != expected[key]
    }


def reconcile_trip_counts(
    passengers: Iterable[PassengerLike],
    stored: Optional[TripCounts] = None,
) -> TripCounts:
    """
    Authoritative counts for a trip, recomputed from its full roster.

    Callers run this after bulk roster changes (re-seeding, imports) and
    overwrite the stored counts with the result instead of trusting the
    accumulated deltas. When ``stored`` is given, any drift is logged.
    """
    passengers = list(passengers)
    counts = compute_counts(passengers)
    if stored is not None:
        drift = counts_drift(stored, passengers)
        if drift:
            logger.info(f"Trip counts drift corrected: {drift} (stored={stored.as_dict()})")
    return counts


def apply_status_transition(
    current: Passenger,
    new_status,
    actor: ActorId,
    now: datetime,
) -> StatusTransition:
    """
    Compute a passenger status change and its count delta.

    Any transition between two distinct statuses is allowed; business
    rules such as forbidding ``dropped -> pending`` are layered by the
    caller. Re-submitting the current status is a no-op with an empty
    delta, which makes duplicate scans and retried writes safe.

    Args:
        current: Passenger as last read from the store.
        new_status: Target status (enum member or string).
        actor: User applying the change.
        now: Timestamp of the change.

    Returns:
        StatusTransition with the updated passenger and the delta
        ``{old: -1, new: +1}``.

    Raises:
        InvalidTransition: ``new_status`` is not a known status.
    """
    target = parse_status(new_status)
    previous = current.status

    if target == previous:
        return StatusTransition(updated_passenger=current.model_copy(), count_delta={}, changed=False)

    changes = {
        "status": target,
        "updated_by": actor,
        "updated_at": now,
    }
    if target == PassengerStatus.BOARDED:
        changes["boarded_at"] = now
    elif target == PassengerStatus.DROPPED:
        changes["dropped_at"] = now

    return StatusTransition(
        updated_passenger=current.model_copy(update=changes),
        count_delta={previous.value: -1, target.value: 1},
        changed=True,
    )


def merge_deltas(*deltas: Mapping[str, int]) -> CountDelta:
    """Sum several count deltas, dropping keys that cancel out."""
    merged: Dict[str, int] = {}
    for delta in deltas:
        for key, amount in delta.items():
            key = parse_status(key).value
            merged[key] = merged.get(key, 0) + amount
    return {key: amount for key, amount in merged.items() if amount != 0}
