"""PriceSchedule database model."""

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class PriceSchedule(Base):
    """Price sheet effective from a date until a later schedule supersedes it."""

    __tablename__ = "price_schedules"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    effective_date: Mapped[date] = mapped_column(index=True)

    # Unit prices per kWh / m3 and the fixed monthly rent
    electricity_price: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=6))
    water_price: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=6))
    base_rent: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=6))

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
