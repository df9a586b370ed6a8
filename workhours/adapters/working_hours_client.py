"""
Client for the working hours (awhours) API.
"""

import asyncio
import logging
from typing import Any, Optional

import requests

from ..domain.exceptions import WorkingHoursAPIError
from ..domain.models import WeeklySchedule, WorkingHoursData
from ..domain.normalizer import WorkingHoursNormalizer
from .api_client import ApiClient

logger = logging.getLogger(__name__)


class WorkingHoursClient:
    """
    Fetches a provider's weekly schedule and normalizes it into blocks.
    """

    def __init__(
        self,
        api_client: ApiClient,
        business_hours_url: str,
        normalizer: WorkingHoursNormalizer | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_client: Authenticated transport
            business_hours_url: Endpoint of the awhours API
            normalizer: Normalizer to apply to raw schedules
        """
        self._api_client = api_client
        self._url = business_hours_url
        self._normalizer = normalizer or WorkingHoursNormalizer()

    def get_working_hours(
        self,
        user_id: str,
        account_id: Optional[str] = None
    ) -> Optional[WorkingHoursData]:
        """
        Fetch and normalize working hours for one user.

        The request asks for ACCOUNT hours when the user is the account itself.

        Returns:
            Normalized working hours, or None if the response carries no schedule

        Raises:
            WorkingHoursAPIError: If the API call fails or the response has an unexpected shape
            InvalidIntervalError: If a slot or break has an impossible range
        """
        params = {
            "type": "ACCOUNT" if user_id == account_id else "USER",
            "userId": user_id,
        }

        try:
            data = self._api_client.get(self._url, params=params)
        except requests.exceptions.RequestException as e:
            raise WorkingHoursAPIError(f"Failed to fetch working hours for {user_id}: {e}") from e

        return self._parse_response(user_id, data)

    async def fetch_working_hours(
        self,
        user_id: str,
        account_id: Optional[str] = None
    ) -> Optional[WorkingHoursData]:
        """Async variant; runs the blocking request in a worker thread."""
        return await asyncio.to_thread(self.get_working_hours, user_id, account_id)

    def _parse_response(self, user_id: str, response_data: Any) -> Optional[WorkingHoursData]:
        """
        Parse the awhours response.

        Response format:
        {
            "data": {
                "awhours": {
                    "weekDayConfig": {
                        "MO": {
                            "hours": [{"start": 540, "end": 1020}],
                            "breaks": [{"start": 720, "end": 780}]
                        }
                    },
                    "timezone": "Asia/Kolkata"
                }
            }
        }
        """
        if not isinstance(response_data, dict):
            raise WorkingHoursAPIError(
                f"Unexpected working hours response for {user_id}: {type(response_data).__name__}"
            )

        data = response_data.get("data")
        if data is not None and not isinstance(data, dict):
            raise WorkingHoursAPIError(f"Unexpected working hours data for {user_id}: {data!r}")

        payload = (data or {}).get("awhours")

        if not isinstance(payload, dict):
            logger.info("No working hours returned for %s", user_id)
            return None

        return self._normalizer.normalize(WeeklySchedule.from_api(payload))
