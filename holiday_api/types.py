"""Column types shared by the ORM models."""

import sqlalchemy as sa
from sqlalchemy import JSON, TypeDecorator


class CodeList(TypeDecorator):
    """List of short codes (subdivisions, holiday categories).

    Native ``ARRAY(Text)`` on PostgreSQL, a JSON list everywhere else. A bare
    string is rejected instead of being stored as a list of characters.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import ARRAY

            return dialect.type_descriptor(ARRAY(sa.Text()))
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            raise TypeError(f"CodeList expects a list of strings, got {value!r}")
        return [str(code) for code in value]

    def process_result_value(self, value, dialect):
        return None if value is None else list(value)
