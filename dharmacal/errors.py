"""Error taxonomy shared by the Panchanga and recurrence services."""

from __future__ import annotations


class DharmaCalError(Exception):
    """Base class for calendar computation failures."""


class InvalidDateError(DharmaCalError, ValueError):
    """Raised when a date/timezone pair cannot be reduced to a civil-day key."""


class InvalidRangeError(DharmaCalError, ValueError):
    """Raised when a date range starts after it ends."""


class EngineComputationError(DharmaCalError, RuntimeError):
    """Raised when the ephemeris engine fails for a date and location."""

    def __init__(self, date_str: str, location_name: str, cause: BaseException) -> None:
        super().__init__(f"Panchanga computation failed for {date_str} at {location_name}: {cause}")
        self.date_str = date_str
        self.location_name = location_name


class MissingRuleDataError(DharmaCalError):
    """Raised inside a rule path when the rule lacks the field it needs."""


class TruncationWarning(UserWarning):
    """Issued when generated occurrences are capped by the safety limit."""
