"""
Adapters layer - External integrations (scheduling APIs, token storage).
"""

from .api_client import ApiClient
from .events_client import CalendarEventsClient
from .mock_clients import MockEventsClient, MockWorkingHoursClient
from .token_store import TokenStore
from .working_hours_client import WorkingHoursClient

__all__ = [
    "ApiClient",
    "CalendarEventsClient",
    "MockEventsClient",
    "MockWorkingHoursClient",
    "TokenStore",
    "WorkingHoursClient",
]
