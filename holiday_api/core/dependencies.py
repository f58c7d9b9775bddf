from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from holiday_api.database import get_db
from holiday_api.services.holiday_fetcher import HolidayFetcher
from holiday_api.services.holiday_service import HolidayService
from holiday_api.services.holiday_store import HolidayStore


def get_holiday_fetcher() -> HolidayFetcher:
    """FastAPI dependency returning a fetcher configured from settings."""
    return HolidayFetcher.from_settings()


async def get_holiday_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    fetcher: Annotated[HolidayFetcher, Depends(get_holiday_fetcher)],
) -> HolidayService:
    """Build a HolidayService bound to the request's database session."""
    return HolidayService(store=HolidayStore(db), fetcher=fetcher)
