"""
Type definitions for the school bus core.

This module contains type aliases used across the package.
"""

from typing import Any, Dict, Mapping, Tuple

# =============================================================================
# Basic type aliases
# =============================================================================

# Coordinates as (lat, lon) tuples
Coordinates = Tuple[float, float]

# =============================================================================
# Roster types
# =============================================================================

# Identifier of the user (driver, supervisor, admin) applying a change
ActorId = str

# Count delta keyed by status value: {"pending": -1, "boarded": 1}
CountDelta = Dict[str, int]

# Raw passenger document as read from a document store
PassengerDocument = Mapping[str, Any]

# Raw student document used when seeding a roster
StudentDocument = Mapping[str, Any]
