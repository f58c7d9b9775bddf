"""Input checks for the holiday query endpoints.

Country codes are checked by length only, not against the ISO 3166 list;
the holiday API itself rejects unknown codes.
"""

from collections.abc import Iterable

MIN_YEAR = 1975
COUNTRY_CODE_LENGTH = 2


def is_valid_country_code(code: str | None) -> bool:
    return code is not None and bool(code.strip()) and len(code.strip()) == COUNTRY_CODE_LENGTH


def are_valid_country_codes(codes: Iterable[str] | None) -> bool:
    return codes is not None and all(is_valid_country_code(code) for code in codes)


def is_valid_year(year: int | None) -> bool:
    """Years before 1975 are outside the holiday API's data coverage."""
    return year is not None and year >= MIN_YEAR
