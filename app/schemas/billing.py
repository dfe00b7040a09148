"""Billing schemas for computed periods and their groupings."""

from decimal import Decimal

from pydantic import BaseModel

from app.schemas.price_schedule import PriceScheduleResponse
from app.schemas.reading import ReadingResponse


class BilledPeriod(ReadingResponse):
    """A reading enriched with usage and cost against its applied schedule.

    Derived on every request, never stored.
    """

    prev_electricity_index: Decimal
    prev_water_index: Decimal
    electricity_usage: Decimal
    water_usage: Decimal
    electricity_cost: Decimal
    water_cost: Decimal
    total_amount: Decimal
    applied_schedule: PriceScheduleResponse | None


class ScheduleGroup(BaseModel):
    """Consecutive billed periods that share the same applied schedule."""

    schedule: PriceScheduleResponse | None
    periods: list[BilledPeriod]


class CalculationRequest(BaseModel):
    """Readings and schedules posted for a one-off calculation."""

    readings: list[ReadingResponse]
    schedules: list[PriceScheduleResponse]
