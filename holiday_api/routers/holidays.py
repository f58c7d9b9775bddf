"""Holidays router.

Endpoints for refreshing stored holidays from the holiday API and for the
aggregate queries over them. Every response is a ``{message, result}``
envelope.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from holiday_api.config import settings
from holiday_api.core.dependencies import get_holiday_service
from holiday_api.core.rate_limit import limiter
from holiday_api.core.validators import are_valid_country_codes, is_valid_year
from holiday_api.schemas.holiday import (
    HolidayResponse,
    NonWeekendHolidayCountResponse,
    PreviousHolidaysResponse,
    SharedHolidaysResponse,
    SyncHolidaysResponse,
)
from holiday_api.services.holiday_service import HolidayService

router = APIRouter(prefix="/holidays", tags=["Holidays"])

RECORDS_FOUND = "Records found."
NO_RECORDS_FOUND = "No records found."
HOLIDAYS_UPDATED = "Holidays updated successfully."
NO_HOLIDAYS_UPDATED = "No holidays were updated."
INVALID_YEAR = "Invalid year. Year must be greater than or equal to 1975."
INVALID_COUNTRY_CODE = "Invalid country code(s). Please refer this link- https://date.nager.at/Country"


def _found_message(result: list) -> str:
    return RECORDS_FOUND if result else NO_RECORDS_FOUND


@router.post("/refresh/{year}/{country_code}", response_model=SyncHolidaysResponse)
@limiter.limit(settings.SYNC_RATE_LIMIT)
async def refresh_holidays(
    request: Request,
    year: int,
    country_code: str,
    service: Annotated[HolidayService, Depends(get_holiday_service)],
):
    """Fetch holidays for a country and year and store the ones not seen yet."""
    created = await service.sync_holidays(year, country_code)
    return SyncHolidaysResponse(
        message=HOLIDAYS_UPDATED if created else NO_HOLIDAYS_UPDATED,
        result=[HolidayResponse.model_validate(h) for h in created],
    )


@router.get("/previous-three/{country_code}", response_model=PreviousHolidaysResponse)
async def previous_three_holidays(
    country_code: str,
    service: Annotated[HolidayService, Depends(get_holiday_service)],
):
    """Return the last three holidays of a country up to today."""
    result = await service.get_previous_three(country_code)
    return PreviousHolidaysResponse(message=_found_message(result), result=result)


@router.get(
    "/non-weekend-count/{year}",
    response_model=NonWeekendHolidayCountResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": NonWeekendHolidayCountResponse}},
)
async def non_weekend_holiday_count(
    year: int,
    service: Annotated[HolidayService, Depends(get_holiday_service)],
    country_codes: Annotated[list[str], Query(alias="countryCodes")],
):
    """Count holidays falling on Monday-Friday for each requested country.

    The only endpoint that validates its input before querying.
    """
    if not is_valid_year(year):
        return _bad_request(INVALID_YEAR)
    if not are_valid_country_codes(country_codes):
        return _bad_request(INVALID_COUNTRY_CODE)

    result = await service.get_non_weekend_counts(year, country_codes)
    return NonWeekendHolidayCountResponse(message=_found_message(result), result=result)


@router.get(
    "/shared/{year}/{first_country}/{second_country}",
    response_model=SharedHolidaysResponse,
)
async def shared_holidays(
    year: int,
    first_country: str,
    second_country: str,
    service: Annotated[HolidayService, Depends(get_holiday_service)],
):
    """Return the dates in a year on which both countries have a holiday."""
    result = await service.get_shared_dates(year, first_country, second_country)
    return SharedHolidaysResponse(message=_found_message(result), result=result)


def _bad_request(message: str) -> JSONResponse:
    body = NonWeekendHolidayCountResponse(message=message, result=[])
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())
