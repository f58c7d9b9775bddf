"""Holiday Service.

Synchronizes public holidays from the holiday API into the ``holidays``
table and answers the aggregate queries on top of it:

- previous three holidays of a country
- non-weekend holiday counts per country in a year
- dates celebrated by two countries in a year
"""

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import date, datetime, timezone

import httpx
from pydantic import TypeAdapter, ValidationError

from holiday_api.core.exceptions import ExternalServiceError, MalformedDataError
from holiday_api.models.holiday import Holiday
from holiday_api.schemas.holiday import (
    ApiErrorPayload,
    HolidayPayload,
    NonWeekendHolidayCount,
    PreviousHoliday,
    SharedHoliday,
)
from holiday_api.services.holiday_fetcher import HolidayFetcher
from holiday_api.services.holiday_store import HolidayStore, year_bounds

logger = logging.getLogger(__name__)

PREVIOUS_HOLIDAYS_LIMIT = 3

_holiday_list = TypeAdapter(list[HolidayPayload])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def is_weekend(day: date) -> bool:
    """Saturday or Sunday, by calendar day-of-week."""
    return day.weekday() >= 5


def build_external_error_message(status_code: int, error: ApiErrorPayload | None) -> str:
    """Describe a failed upstream call.

    With a problem-details body: ``API returned error 400: <title>. <msg>; <msg>``.
    Without one: ``API returned status code 404.``
    """
    if error is None:
        return f"API returned status code {status_code}."

    upstream_status = error.status if error.status is not None else status_code
    details = "; ".join(message for messages in error.errors.values() for message in messages)
    return f"API returned error {upstream_status}: {error.title}. {details}".rstrip()


def select_new_holidays(
    fetched: Iterable[HolidayPayload],
    existing: set[tuple[str, date]],
) -> list[HolidayPayload]:
    """Keep fetched holidays whose ``(country_code, date)`` is not stored yet.

    Stored entries always win, even if names differ. A second entry for the
    same country and date within one batch is skipped as well.
    """
    seen = set(existing)
    new: list[HolidayPayload] = []
    for holiday in fetched:
        key = (holiday.country_code, holiday.date)
        if key in seen:
            continue
        seen.add(key)
        new.append(holiday)
    return new


def count_non_weekend_holidays(
    holidays: Iterable[Holiday],
    country_codes: Iterable[str],
) -> list[NonWeekendHolidayCount]:
    """Count weekday holidays per requested country, highest count first.

    Every requested code appears exactly once (0 if it has no holidays).
    Equal counts keep the order in which the codes were requested.
    """
    counts = Counter(h.country_code for h in holidays if not is_weekend(h.date))
    results = [
        NonWeekendHolidayCount(country_code=code, count=counts.get(code, 0))
        for code in dict.fromkeys(country_codes)
    ]
    return sorted(results, key=lambda item: item.count, reverse=True)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class HolidayService:
    def __init__(
        self,
        store: HolidayStore,
        fetcher: HolidayFetcher,
        today: Callable[[], date] = _utc_today,
    ):
        self.store = store
        self.fetcher = fetcher
        self.today = today

    async def _fetch(self, year: int, country_code: str) -> list[HolidayPayload]:
        try:
            outcome = await self.fetcher.fetch(year, country_code)
        except httpx.HTTPError as exc:
            raise ExternalServiceError(
                f"Holiday API request for {country_code} {year} failed: {exc!r}",
                unavailable=True,
            ) from exc
        except ValueError as exc:
            raise MalformedDataError(
                f"Holiday API sent invalid JSON for {country_code} {year}: {exc}"
            ) from exc

        if not outcome.ok:
            raise ExternalServiceError(
                build_external_error_message(outcome.status_code, outcome.error),
                upstream_status=outcome.status_code,
                errors=outcome.error.errors if outcome.error is not None else None,
            )

        try:
            holidays = _holiday_list.validate_python(outcome.holidays)
        except ValidationError as exc:
            raise MalformedDataError(
                f"Unexpected holiday payload for {country_code} {year}: {exc}"
            ) from exc

        for holiday in holidays:
            if not holiday.country_code:
                holiday.country_code = country_code
        return holidays

    async def sync_holidays(self, year: int, country_code: str) -> list[Holiday]:
        """Fetch holidays for a country and year and store the unseen ones.

        Dates that are already stored for the country are skipped, never
        updated.

        Returns:
            Only the newly inserted holidays.

        Raises:
            ExternalServiceError: If the holiday API fails or is unreachable.
            MalformedDataError: If the holiday API answers with unexpected data.
        """
        fetched = await self._fetch(year, country_code)
        if not fetched:
            logger.info("Holiday sync %s %d: API returned no holidays", country_code, year)
            return []

        existing: set[tuple[str, date]] = set()
        for code in dict.fromkeys([country_code, *(h.country_code for h in fetched)]):
            stored = await self.store.dates_for_country_year(code, year)
            existing.update((code, day) for day in stored)

        created = [
            Holiday(**payload.model_dump())
            for payload in select_new_holidays(fetched, existing)
        ]
        if created:
            await self.store.add_all(created)

        logger.info(
            "Holiday sync %s %d: %d fetched, %d inserted",
            country_code, year, len(fetched), len(created),
        )
        return created

    async def get_previous_three(self, country_code: str) -> list[PreviousHoliday]:
        """The three most recent holidays up to and including today (UTC)."""
        holidays = await self.store.previous(
            country_code, self.today(), PREVIOUS_HOLIDAYS_LIMIT
        )
        return [PreviousHoliday(date=h.date, name=h.name) for h in holidays]

    async def get_non_weekend_counts(
        self,
        year: int,
        country_codes: Iterable[str],
    ) -> list[NonWeekendHolidayCount]:
        codes = list(country_codes)
        bounds = year_bounds(year)
        holidays = await self.store.in_range(codes, *bounds) if bounds is not None else []
        return count_non_weekend_holidays(holidays, codes)

    async def get_shared_dates(
        self,
        year: int,
        country_a: str,
        country_b: str,
    ) -> list[SharedHoliday]:
        """Dates in ``year`` on which both countries have a holiday.

        Comparing a country with itself pairs every holiday with itself.
        """
        rows = await self.store.shared(year, country_a, country_b)
        return [
            SharedHoliday(date=day, local_name_a=name_a, local_name_b=name_b)
            for day, name_a, name_b in rows
        ]
