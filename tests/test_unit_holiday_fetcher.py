"""Tests for HolidayFetcher with a mocked HTTP transport."""

import httpx
import pytest

from holiday_api.services.holiday_fetcher import HolidayFetcher

BASE_URL = "https://date.nager.at/api/v3/PublicHolidays"


def _fetcher(handler) -> HolidayFetcher:
    return HolidayFetcher(base_url=BASE_URL + "/", transport=httpx.MockTransport(handler))


class TestHolidayFetcher:
    async def test_success(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=[
                {"date": "2025-01-01", "localName": "Neujahr", "name": "New Year's Day", "countryCode": "DE"},
            ])

        result = await _fetcher(handler).fetch(2025, "DE")

        assert seen == [f"{BASE_URL}/2025/DE"]
        assert result.ok is True
        assert result.error is None
        assert result.holidays[0]["localName"] == "Neujahr"

    async def test_no_content(self):
        result = await _fetcher(lambda request: httpx.Response(204)).fetch(2025, "DE")

        assert result.ok is True
        assert result.holidays == []

    async def test_problem_details_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={
                "type": "https://tools.ietf.org/html/rfc7231#section-6.5.1",
                "title": "One or more validation errors occurred.",
                "status": 400,
                "errors": {"countryCode": ["The value 'XYZ' is not valid."]},
            })

        result = await _fetcher(handler).fetch(2025, "XYZ")

        assert result.ok is False
        assert result.status_code == 400
        assert result.error.title == "One or more validation errors occurred."
        assert result.error.errors == {"countryCode": ["The value 'XYZ' is not valid."]}

    async def test_error_without_json(self):
        result = await _fetcher(lambda request: httpx.Response(404, text="Not Found")).fetch(2025, "ZZ")

        assert result.ok is False
        assert result.status_code == 404
        assert result.error is None

    async def test_error_json_without_title(self):
        result = await _fetcher(
            lambda request: httpx.Response(500, json={"unexpected": True})
        ).fetch(2025, "DE")

        assert result.error is None

    async def test_invalid_json_raises_value_error(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(ValueError):
            await fetcher.fetch(2025, "DE")

    async def test_transport_error_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.HTTPError):
            await _fetcher(handler).fetch(2025, "DE")
