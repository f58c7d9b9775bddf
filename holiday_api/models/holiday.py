from datetime import date

from sqlalchemy import Boolean, Date, Integer, String, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column

from holiday_api.database import Base
from holiday_api.types import CodeList


class Holiday(Base):
    __tablename__ = "holidays"
    __table_args__ = (
        UniqueConstraint("country_code", "date", name="uq_holidays_country_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    local_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    country_code: Mapped[str] = mapped_column(String(2), nullable=False)
    is_fixed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    is_global: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    counties: Mapped[list[str] | None] = mapped_column(CodeList, nullable=True)
    launch_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    types: Mapped[list[str]] = mapped_column(CodeList, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Holiday(id={self.id}, country_code={self.country_code!r}, date={self.date})>"
