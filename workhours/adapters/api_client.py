"""
HTTP transport with bearer token injection and retry on 401 and 5xx.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

import requests

from ..config import HttpConfig
from ..domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    def get_token(self) -> Optional[str]:
        """Return the current access token, if any."""


class ApiClient:
    """
    Thin wrapper around ``requests.Session`` for the scheduling APIs.

    Retry policy:
    - 401: one retry after re-reading the token (it may have been refreshed)
    - 5xx: up to ``max_retries`` retries with a fixed delay
    - anything else: no retry
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        http_config: HttpConfig | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._token_provider = token_provider
        self._config = http_config or HttpConfig()
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})
        self._sleep = sleep

    def get(self, url: str, params: Mapping[str, Any] | None = None) -> Dict[str, Any]:
        """
        Perform an authenticated GET and return the decoded JSON body.

        Raises:
            AuthenticationError: If no token is stored or it is rejected after retry
            requests.exceptions.RequestException: On transport or HTTP errors
        """
        serialized = self._serialize_params(params or {})
        attempt = 0

        while True:
            response = self._session.get(
                url,
                params=serialized,
                headers=self._auth_headers(),
                timeout=self._config.timeout_seconds,
            )

            status = response.status_code
            max_retry = self._max_retries_for(status)

            if status < 400 or attempt >= max_retry:
                break

            attempt += 1
            delay = (
                self._config.auth_retry_delay_seconds
                if status == 401
                else self._config.retry_delay_seconds
            )
            logger.info(
                "GET %s returned %s, retrying in %ss (attempt %s/%s)",
                url, status, delay, attempt, max_retry,
            )
            self._sleep(delay)

        if response.status_code == 401:
            raise AuthenticationError(f"Access token rejected by {url}")

        response.raise_for_status()
        return response.json()

    def _auth_headers(self) -> Dict[str, str]:
        token = self._token_provider.get_token()
        if not token:
            raise AuthenticationError("No access token available")
        return {"Authorization": f"Bearer {token}"}

    def _max_retries_for(self, status: int) -> int:
        if status == 401:
            return 1
        if 500 <= status <= 599:
            return self._config.max_retries
        return 0

    @staticmethod
    def _serialize_params(params: Mapping[str, Any]) -> Dict[str, Any]:
        """Object-valued query params are sent as JSON strings."""
        return {
            key: json.dumps(value) if isinstance(value, (dict, list)) else value
            for key, value in params.items()
        }
