"""Holiday Fetcher.

Retrieves public holidays for a country and year from the Nager.Date API
(``GET <base>/<year>/<countryCode>``).
"""

import logging
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from holiday_api.config import settings
from holiday_api.schemas.holiday import ApiErrorPayload

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Outcome of one upstream call.

    On success ``holidays`` holds the raw JSON objects; on failure ``error``
    holds the parsed problem-details body when the API sent one.
    """

    status_code: int
    holidays: list = field(default_factory=list)
    error: ApiErrorPayload | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _parse_error_body(response: httpx.Response) -> ApiErrorPayload | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    try:
        return ApiErrorPayload.model_validate(body)
    except ValidationError:
        return None


class HolidayFetcher:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls) -> "HolidayFetcher":
        return cls(
            base_url=settings.HOLIDAY_API_BASE_URL,
            timeout=settings.HOLIDAY_API_TIMEOUT,
        )

    async def fetch(self, year: int, country_code: str) -> FetchResult:
        """Fetch the holiday list for ``country_code`` in ``year``.

        Raises:
            httpx.HTTPError: If the request could not be completed.
            ValueError: If a success response does not carry valid JSON.
        """
        url = f"{self.base_url}/{year}/{country_code}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(url)

        logger.debug("GET %s -> %d", url, response.status_code)

        if not response.is_success:
            return FetchResult(
                status_code=response.status_code,
                error=_parse_error_body(response),
            )

        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return FetchResult(status_code=response.status_code)

        return FetchResult(status_code=response.status_code, holidays=response.json())
