"""Reading database model - one row per billing period."""

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Reading(Base):
    """Monthly electricity and water meter snapshot."""

    __tablename__ = "readings"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    reading_date: Mapped[date] = mapped_column(index=True)

    # Cumulative meter indices (kWh and m3)
    electricity_index: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=6))
    water_index: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=6))

    # Meter replaced or rolled over at this reading
    is_electricity_reset: Mapped[bool] = mapped_column(default=False)
    is_water_reset: Mapped[bool] = mapped_column(default=False)

    is_paid: Mapped[bool] = mapped_column(default=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        index=True,
    )
