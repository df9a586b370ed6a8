"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import (
    AvailabilityService,
    FetchResult,
    UnavailableHoursTable,
    WorkingHoursClientProtocol,
)

__all__ = [
    "AvailabilityService",
    "FetchResult",
    "UnavailableHoursTable",
    "WorkingHoursClientProtocol",
]
