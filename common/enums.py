from enum import Enum


class IncludePolicy(str, Enum):
    """Defines which distributions on the window boundaries are counted."""

    OPEN_CLOSED = "open-closed"
    OPEN_OPEN = "open-open"


class DistributionFrequency(str, Enum):
    """Defines the inferred payment cadence of a distribution stream."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    UNKNOWN = "unknown"
