"""Shared rate limiter instance.

Storage comes from ``RATE_LIMIT_STORAGE_URI``: in-memory by default, any
``limits`` storage URI (e.g. ``redis://...``) when several instances must
share counters.
"""

import logging

from slowapi import Limiter
from slowapi.util import get_remote_address

from holiday_api.config import settings

logger = logging.getLogger(__name__)


def _create_limiter() -> Limiter:
    logger.info("Rate limiter storage: %s", settings.RATE_LIMIT_STORAGE_URI)
    return Limiter(
        key_func=get_remote_address,
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    )


limiter = _create_limiter()
