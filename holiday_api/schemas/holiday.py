from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Upstream (Nager.Date) payloads
# ---------------------------------------------------------------------------

class HolidayPayload(BaseModel):
    """One holiday as returned by ``GET /PublicHolidays/{year}/{countryCode}``."""

    model_config = ConfigDict(populate_by_name=True)

    date: date
    local_name: str = Field("", alias="localName")
    name: str = ""
    country_code: str = Field("", alias="countryCode")
    is_fixed: bool = Field(False, alias="fixed")
    is_global: bool = Field(False, alias="global")
    counties: list[str] | None = None
    launch_year: int | None = Field(None, alias="launchYear")
    types: list[str] = Field(default_factory=list)

    @field_validator("local_name", "name", "country_code", mode="before")
    @classmethod
    def _none_as_empty_string(cls, value):
        return "" if value is None else value

    @field_validator("types", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value):
        return [] if value is None else value


class ApiErrorPayload(BaseModel):
    """Problem-details body returned by the holiday API on failure."""

    title: str
    status: int | None = None
    errors: dict[str, list[str]] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Result items
# ---------------------------------------------------------------------------

class HolidayResponse(BaseModel):
    date: date
    local_name: str
    name: str
    country_code: str
    is_fixed: bool
    is_global: bool
    counties: list[str] | None = None
    launch_year: int | None = None
    types: list[str] = []
    model_config = ConfigDict(from_attributes=True)


class PreviousHoliday(BaseModel):
    date: date
    name: str


class NonWeekendHolidayCount(BaseModel):
    country_code: str
    count: int


class SharedHoliday(BaseModel):
    """A date on which both compared countries have a holiday."""

    date: date
    local_name_a: str
    local_name_b: str


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------

class SyncHolidaysResponse(BaseModel):
    message: str
    result: list[HolidayResponse]


class PreviousHolidaysResponse(BaseModel):
    message: str
    result: list[PreviousHoliday]


class NonWeekendHolidayCountResponse(BaseModel):
    message: str
    result: list[NonWeekendHolidayCount]


class SharedHolidaysResponse(BaseModel):
    message: str
    result: list[SharedHoliday]


class ErrorResponse(BaseModel):
    message: str
    errors: dict[str, list[str]] = Field(default_factory=dict)
