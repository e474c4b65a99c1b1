"""
Exceptions raised by the school bus core.
"""

from typing import Any


class SchoolBusError(Exception):
    """Base class for errors raised by this package."""


class InvalidTransition(SchoolBusError, ValueError):
    """Raised when a passenger status change targets an unknown status."""

    def __init__(self, value: Any, message: str = ""):
        self.value = value
        super().__init__(message or f"Unknown passenger status: {value!r}")
