"""SQLAlchemy ORM models.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` runs.
"""

from holiday_api.models.holiday import Holiday  # noqa: F401

__all__ = [
    "Holiday",
]
