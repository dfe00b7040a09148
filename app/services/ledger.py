"""Ledger orchestration: loads inputs, recomputes billing, applies mutations."""

import calendar
import logging
from collections.abc import Iterable
from datetime import date

from app.core.errors import NotFoundError, StorageError
from app.schemas.billing import BilledPeriod, ScheduleGroup
from app.schemas.price_schedule import (
    PriceScheduleCreate,
    PriceScheduleResponse,
    PriceScheduleUpdate,
)
from app.schemas.reading import ReadingCreate, ReadingResponse, ReadingUpdate
from app.services.billing import compute_billed_periods
from app.services.storage import RentalStore

logger = logging.getLogger(__name__)


def add_one_month(value: date) -> date:
    """Same day next month, clamped to the last day of that month."""
    year, month = (value.year + 1, 1) if value.month == 12 else (value.year, value.month + 1)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def group_by_schedule(periods: Iterable[BilledPeriod]) -> list[ScheduleGroup]:
    """Split periods into runs of consecutive entries with the same applied schedule."""
    groups: list[ScheduleGroup] = []
    for period in periods:
        schedule_id = period.applied_schedule.id if period.applied_schedule else None
        if groups:
            current = groups[-1]
            current_id = current.schedule.id if current.schedule else None
            if current_id == schedule_id:
                current.periods.append(period)
                continue
        groups.append(ScheduleGroup(schedule=period.applied_schedule, periods=[period]))
    return groups


class RentalLedger:
    """In-memory view of the store with billed periods derived on demand.

    Billed periods are recomputed after any change to the readings or the
    price schedules and cached until the next change.
    """

    def __init__(self, store: RentalStore) -> None:
        self.store = store
        self._schedules: list[PriceScheduleResponse] = []
        self._readings: list[ReadingResponse] = []
        self._periods: list[BilledPeriod] | None = None

    @property
    def schedules(self) -> list[PriceScheduleResponse]:
        return self._schedules

    @schedules.setter
    def schedules(self, value: list[PriceScheduleResponse]) -> None:
        self._schedules = value
        self._periods = None

    @property
    def readings(self) -> list[ReadingResponse]:
        return self._readings

    @readings.setter
    def readings(self, value: list[ReadingResponse]) -> None:
        self._readings = value
        self._periods = None

    def load(self) -> "RentalLedger":
        """Fetch both collections from the store."""
        self.schedules = self.store.list_schedules()
        self.readings = self.store.list_readings()
        return self

    @property
    def billed_periods(self) -> list[BilledPeriod]:
        if self._periods is None:
            logger.debug("Recomputing billed periods for %d readings", len(self._readings))
            self._periods = compute_billed_periods(self._readings, self._schedules)
        return self._periods

    def get_reading(self, reading_id: str) -> ReadingResponse:
        for reading in self._readings:
            if reading.id == reading_id:
                return reading
        raise NotFoundError("Reading", reading_id)

    def replace_reading(self, reading: ReadingResponse) -> None:
        """Swap in a new version of a reading, keeping list order."""
        self.readings = [reading if r.id == reading.id else r for r in self._readings]

    def latest_bill(self) -> BilledPeriod | None:
        periods = self.billed_periods
        return periods[-1] if periods else None

    def suggest_next_reading(self) -> ReadingCreate | None:
        """Draft the next reading from the most recent one.

        The date moves forward one month and the indices default to the
        latest values so only the change needs typing in.
        """
        if not self._readings:
            return None
        latest = max(self._readings, key=lambda r: r.reading_date)
        return ReadingCreate(
            reading_date=add_one_month(latest.reading_date),
            electricity_index=latest.electricity_index,
            water_index=latest.water_index,
        )

    def grouped_periods(self) -> list[ScheduleGroup]:
        return group_by_schedule(self.billed_periods)

    # --- Mutations ---

    def add_reading(self, data: ReadingCreate) -> ReadingResponse:
        reading = self.store.add_reading(data)
        self.load()
        return reading

    def update_reading(self, reading_id: str, data: ReadingUpdate) -> ReadingResponse:
        reading = self.store.update_reading(reading_id, data)
        self.load()
        return reading

    def delete_reading(self, reading_id: str) -> None:
        self.store.delete_reading(reading_id)
        self.load()

    def add_schedule(self, data: PriceScheduleCreate) -> PriceScheduleResponse:
        schedule = self.store.add_schedule(data)
        self.load()
        return schedule

    def update_schedule(
        self, schedule_id: str, data: PriceScheduleUpdate
    ) -> PriceScheduleResponse:
        schedule = self.store.update_schedule(schedule_id, data)
        self.load()
        return schedule

    def delete_schedule(self, schedule_id: str) -> None:
        self.store.delete_schedule(schedule_id)
        self.load()

    def toggle_paid(self, reading_id: str) -> ReadingResponse:
        return TogglePaidCommand(self, reading_id).execute()


class TogglePaidCommand:
    """Flip a reading's paid flag optimistically.

    The ledger shows the new state before the store confirms it. If the
    store write fails the previous state is put back and the error is
    re-raised; there is no retry.
    """

    def __init__(self, ledger: RentalLedger, reading_id: str) -> None:
        self.ledger = ledger
        self.original = ledger.get_reading(reading_id)
        self.updated = self.original.model_copy(update={"is_paid": not self.original.is_paid})

    def apply(self) -> None:
        self.ledger.replace_reading(self.updated)

    def revert(self) -> None:
        self.ledger.replace_reading(self.original)

    def execute(self) -> ReadingResponse:
        self.apply()
        try:
            stored = self.ledger.store.update_reading(
                self.original.id, ReadingUpdate(is_paid=self.updated.is_paid)
            )
        except (StorageError, NotFoundError):
            logger.warning("Reverting paid status of reading %s", self.original.id)
            self.revert()
            raise
        self.ledger.replace_reading(stored)
        return stored
