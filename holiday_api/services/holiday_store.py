"""Holiday Store.

Thin query layer over the ``holidays`` table. The session is passed in by
the caller; SQLAlchemy failures leave this module as ``StorageError`` or,
for constraint violations, ``InvalidStateError``.
"""

from collections.abc import Iterable
from datetime import MAXYEAR, MINYEAR, date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from holiday_api.database import translate_storage_errors
from holiday_api.models.holiday import Holiday


def year_bounds(year: int) -> tuple[date, date] | None:
    """First and last day of a calendar year, both inclusive.

    Returns None for years a ``date`` cannot represent; nothing can be
    stored for them.
    """
    if not MINYEAR <= year <= MAXYEAR:
        return None
    return date(year, 1, 1), date(year, 12, 31)


class HolidayStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def dates_for_country_year(self, country_code: str, year: int) -> set[date]:
        """Return the dates already stored for a country in a year."""
        bounds = year_bounds(year)
        if bounds is None:
            return set()
        start, end = bounds
        with translate_storage_errors(f"Loading stored dates for {country_code} in {year} failed"):
            result = await self.db.execute(
                select(Holiday.date).where(
                    Holiday.country_code == country_code,
                    Holiday.date >= start,
                    Holiday.date <= end,
                )
            )
            return set(result.scalars().all())

    async def previous(self, country_code: str, until: date, limit: int) -> list[Holiday]:
        """Most recent holidays on or before ``until``, newest first."""
        with translate_storage_errors(f"Loading previous holidays for {country_code} failed"):
            result = await self.db.execute(
                select(Holiday)
                .where(Holiday.country_code == country_code, Holiday.date <= until)
                .order_by(Holiday.date.desc(), Holiday.id)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def in_range(
        self,
        country_codes: Iterable[str],
        start: date,
        end: date,
    ) -> list[Holiday]:
        """Holidays of the given countries with ``start <= date <= end``."""
        codes = list(country_codes)
        with translate_storage_errors(f"Loading holidays for {', '.join(codes)} in {start.year} failed"):
            result = await self.db.execute(
                select(Holiday)
                .where(
                    Holiday.country_code.in_(codes),
                    Holiday.date >= start,
                    Holiday.date <= end,
                )
                .order_by(Holiday.date, Holiday.id)
            )
            return list(result.scalars().all())

    async def shared(
        self,
        year: int,
        country_a: str,
        country_b: str,
    ) -> list[tuple[date, str, str]]:
        """Self-join on date: ``(date, local name in A, local name in B)``.

        The year filter applies to country A's side of the join.
        """
        bounds = year_bounds(year)
        if bounds is None:
            return []
        start, end = bounds
        first = aliased(Holiday)
        second = aliased(Holiday)
        with translate_storage_errors(f"Loading shared holidays for {country_a} and {country_b} in {year} failed"):
            result = await self.db.execute(
                select(first.date, first.local_name, second.local_name)
                .join(second, second.date == first.date)
                .where(
                    first.country_code == country_a,
                    second.country_code == country_b,
                    first.date >= start,
                    first.date <= end,
                )
                .order_by(first.date, first.id, second.id)
            )
            return [tuple(row) for row in result.all()]

    async def add_all(self, holidays: list[Holiday]) -> None:
        """Insert a batch of new holidays in a single flush."""
        with translate_storage_errors("Saving holidays failed"):
            self.db.add_all(holidays)
            await self.db.flush()
