"""Billing calculator: turns readings and price schedules into billed periods."""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from typing import Any

import pydantic

from app.core.errors import ValidationError
from app.schemas.billing import BilledPeriod
from app.schemas.price_schedule import PriceScheduleResponse
from app.schemas.reading import ReadingResponse

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _validate_all(model: type[pydantic.BaseModel], items: Iterable[Any], kind: str) -> list:
    """Validate every item up front so a bad record aborts the whole calculation."""
    validated = []
    for position, item in enumerate(items):
        try:
            validated.append(model.model_validate(item, from_attributes=True))
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid {kind} at position {position}: {exc}") from exc
    return validated


def compute_usage(current: Decimal, previous: Decimal | None, is_reset: bool) -> Decimal:
    """Usage of one meter for a period.

    A reset meter started from zero, so its index is the usage. Without a
    previous reading there is no baseline and usage is zero. A negative delta
    is clamped to zero instead of being rejected.
    """
    if is_reset:
        return current
    if previous is None:
        return ZERO
    return max(ZERO, current - previous)


def find_applicable_schedule(
    schedules_desc: Sequence[PriceScheduleResponse],
    on_date: date,
) -> PriceScheduleResponse | None:
    """Return the latest schedule effective on or before ``on_date``.

    ``schedules_desc`` must be ordered by effective date, most recent first.
    """
    return next((s for s in schedules_desc if s.effective_date <= on_date), None)


def compute_billed_periods(
    readings: Iterable[ReadingResponse | Any],
    schedules: Iterable[PriceScheduleResponse | Any],
) -> list[BilledPeriod]:
    """Compute a billed period for every reading.

    Readings and schedules may come in any order, as schema instances,
    mappings or ORM rows. Readings sharing a date keep their input order,
    as do schedules sharing an effective date.

    Raises:
        ValidationError: if any date is unparsable or any number is
            negative or non-finite.
    """
    valid_readings: list[ReadingResponse] = _validate_all(ReadingResponse, readings, "reading")
    valid_schedules: list[PriceScheduleResponse] = _validate_all(
        PriceScheduleResponse, schedules, "price schedule"
    )

    # sorted() is stable, also with reverse=True
    sorted_readings = sorted(valid_readings, key=lambda r: r.reading_date)
    schedules_desc = sorted(valid_schedules, key=lambda s: s.effective_date, reverse=True)

    periods: list[BilledPeriod] = []
    previous: ReadingResponse | None = None
    for reading in sorted_readings:
        applied = find_applicable_schedule(schedules_desc, reading.reading_date)

        prev_electricity = previous.electricity_index if previous else None
        prev_water = previous.water_index if previous else None
        electricity_usage = compute_usage(
            reading.electricity_index, prev_electricity, reading.is_electricity_reset
        )
        water_usage = compute_usage(reading.water_index, prev_water, reading.is_water_reset)

        # No schedule means nothing to price against, base rent included
        electricity_cost = water_cost = total = ZERO
        if applied is not None:
            electricity_cost = electricity_usage * applied.electricity_price
            water_cost = water_usage * applied.water_price
            total = electricity_cost + water_cost + applied.base_rent

        periods.append(
            BilledPeriod(
                **reading.model_dump(),
                prev_electricity_index=prev_electricity if prev_electricity is not None else ZERO,
                prev_water_index=prev_water if prev_water is not None else ZERO,
                electricity_usage=electricity_usage,
                water_usage=water_usage,
                electricity_cost=electricity_cost,
                water_cost=water_cost,
                total_amount=total,
                applied_schedule=applied,
            )
        )
        previous = reading

    logger.debug(
        "Computed %d billed periods against %d price schedules",
        len(periods),
        len(schedules_desc),
    )
    return periods
