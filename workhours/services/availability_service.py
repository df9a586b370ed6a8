"""
Application service for provider availability.

The service fans out working-hours fetches to a client adapter, joins them,
and delegates the unavailable-hours computation to the pure domain functions.
The computed per-weekday table is kept as a snapshot so that looking up a date
is a dictionary access rather than a recomputation.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..domain.availability import get_unavailable_hours_by_day_of_week
from ..domain.exceptions import WorkhoursError
from ..domain.models import UnavailableHour, UnavailableHoursByDayOfWeek, WorkingHoursData
from ..domain.time_utils import DateLike, day_of_week

logger = logging.getLogger(__name__)


class WorkingHoursClientProtocol(Protocol):
    """Protocol describing the working hours client behaviour needed by the service."""

    async def fetch_working_hours(
        self,
        user_id: str,
        account_id: Optional[str] = None,
    ) -> Optional[WorkingHoursData]:
        """Return normalized working hours, or None when the provider has none."""


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching several providers; failures become warnings."""
    working_hours_map: Dict[str, WorkingHoursData]
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UnavailableHoursTable:
    """Snapshot of unavailable hours per weekday for one set of providers."""
    provider_ids: Tuple[str, ...]
    working_hours_map: Mapping[str, WorkingHoursData]
    by_day_of_week: UnavailableHoursByDayOfWeek
    warnings: Tuple[str, ...] = ()
    used_fallback: bool = False

    def for_date(self, date: DateLike) -> List[UnavailableHour]:
        return list(self.by_day_of_week.get(day_of_week(date), []))


class AvailabilityService:
    """
    Orchestrates working-hours retrieval and unavailable-hours calculation.

    When no provider has working hours at all, ``fallback_unavailable_hours``
    is applied to every weekday instead of showing the whole day as open.
    """

    def __init__(
        self,
        working_hours_client: WorkingHoursClientProtocol,
        fallback_unavailable_hours: Optional[Sequence[UnavailableHour]] = None,
    ) -> None:
        self._client = working_hours_client
        self._fallback = list(fallback_unavailable_hours or [])
        self._requested_provider_ids: frozenset[str] = frozenset()
        self._table = self.build_table(provider_ids=(), working_hours_map={})

    @property
    def table(self) -> UnavailableHoursTable:
        return self._table

    async def fetch_working_hours_map(
        self,
        *,
        provider_ids: Sequence[str],
        account_id: Optional[str],
    ) -> FetchResult:
        """
        Fetch all providers concurrently and wait for every one to settle.

        A provider whose fetch fails is left out of the map and reported as a
        warning; the others are unaffected.
        """
        results = await asyncio.gather(
            *(self._fetch_one(provider_id, account_id) for provider_id in provider_ids)
        )

        working_hours_map: Dict[str, WorkingHoursData] = {}
        warnings: List[str] = []

        for provider_id, working_hours, warning in results:
            if warning:
                warnings.append(warning)
            if working_hours is not None:
                working_hours_map[provider_id] = working_hours

        return FetchResult(working_hours_map=working_hours_map, warnings=warnings)

    def build_table(
        self,
        *,
        provider_ids: Sequence[str],
        working_hours_map: Mapping[str, WorkingHoursData],
        warnings: Sequence[str] = (),
    ) -> UnavailableHoursTable:
        """Compute the per-weekday table, applying the fallback for an empty map."""
        by_day_of_week = get_unavailable_hours_by_day_of_week(working_hours_map)
        used_fallback = not by_day_of_week and bool(self._fallback)

        if used_fallback:
            by_day_of_week = {weekday: list(self._fallback) for weekday in range(7)}

        return UnavailableHoursTable(
            provider_ids=tuple(provider_ids),
            working_hours_map=dict(working_hours_map),
            by_day_of_week=by_day_of_week,
            warnings=tuple(warnings),
            used_fallback=used_fallback,
        )

    async def refresh(
        self,
        *,
        provider_ids: Sequence[str],
        account_id: Optional[str],
    ) -> UnavailableHoursTable:
        """
        Refetch working hours and update the snapshot.

        The table is only recomputed when the fetched data differs from the
        current snapshot. If another refresh for a different provider set was
        started while this one was in flight, this result is dropped.
        """
        requested = frozenset(provider_ids)
        self._requested_provider_ids = requested

        result = await self.fetch_working_hours_map(
            provider_ids=provider_ids,
            account_id=account_id,
        )

        if requested != self._requested_provider_ids:
            logger.info("Discarding superseded working hours for %s", sorted(requested))
            return self._table

        if result.working_hours_map == dict(self._table.working_hours_map):
            self._table = UnavailableHoursTable(
                provider_ids=tuple(provider_ids),
                working_hours_map=self._table.working_hours_map,
                by_day_of_week=self._table.by_day_of_week,
                warnings=tuple(result.warnings),
                used_fallback=self._table.used_fallback,
            )
            return self._table

        self._table = self.build_table(
            provider_ids=provider_ids,
            working_hours_map=result.working_hours_map,
            warnings=result.warnings,
        )
        return self._table

    def unavailable_hours_for(self, date: DateLike) -> List[UnavailableHour]:
        """Look up a date's unavailable hours in the current snapshot."""
        return self._table.for_date(date)

    async def _fetch_one(
        self,
        provider_id: str,
        account_id: Optional[str],
    ) -> Tuple[str, Optional[WorkingHoursData], Optional[str]]:
        try:
            working_hours = await self._client.fetch_working_hours(provider_id, account_id)
        except WorkhoursError as exc:
            logger.warning("Could not fetch working hours for %s: %s", provider_id, exc)
            return provider_id, None, f"Working hours unavailable for {provider_id}: {exc}"

        return provider_id, working_hours, None
