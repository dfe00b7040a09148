"""Storage backends for readings and price schedules.

Stores are constructed explicitly and handed to the ledger; there is no
module-level store instance.
"""

import copy
import json
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pydantic
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, StorageError
from app.models.price_schedule import PriceSchedule
from app.models.reading import Reading
from app.schemas.price_schedule import (
    PriceScheduleCreate,
    PriceScheduleResponse,
    PriceScheduleUpdate,
)
from app.schemas.reading import ReadingCreate, ReadingResponse, ReadingUpdate

logger = logging.getLogger(__name__)

# Demo data served by the JSON store until something is written
DEMO_SCHEDULES: list[dict[str, Any]] = [
    {
        "id": "1",
        "effective_date": "2024-01-01",
        "electricity_price": "4500",
        "water_price": "15000",
        "base_rent": "3500000",
    },
]

DEMO_READINGS: list[dict[str, Any]] = [
    {"id": "1", "reading_date": "2024-04-15", "electricity_index": "2337.6",
     "water_index": "125.4", "is_paid": True, "note": "April"},
    {"id": "2", "reading_date": "2024-05-15", "electricity_index": "2518.5",
     "water_index": "130.3", "is_paid": True, "note": "May"},
    {"id": "3", "reading_date": "2024-06-15", "electricity_index": "2697.0",
     "water_index": "135.5", "is_paid": True, "note": "June"},
    {"id": "4", "reading_date": "2024-07-15", "electricity_index": "2863.8",
     "water_index": "140.5", "is_paid": False, "note": "July"},
]


class RentalStore(ABC):
    """Persistence interface for the ledger's two input collections."""

    @abstractmethod
    def list_schedules(self) -> list[PriceScheduleResponse]:
        """Return price schedules, most recent effective date first."""

    @abstractmethod
    def add_schedule(self, data: PriceScheduleCreate) -> PriceScheduleResponse: ...

    @abstractmethod
    def update_schedule(
        self, schedule_id: str, data: PriceScheduleUpdate
    ) -> PriceScheduleResponse: ...

    @abstractmethod
    def delete_schedule(self, schedule_id: str) -> None: ...

    @abstractmethod
    def list_readings(self) -> list[ReadingResponse]:
        """Return readings, oldest reading date first."""

    @abstractmethod
    def add_reading(self, data: ReadingCreate) -> ReadingResponse: ...

    @abstractmethod
    def update_reading(self, reading_id: str, data: ReadingUpdate) -> ReadingResponse: ...

    @abstractmethod
    def delete_reading(self, reading_id: str) -> None: ...


class SqlRentalStore(RentalStore):
    """Store backed by SQLAlchemy tables.

    Every database call runs under ``_guard`` so driver failures surface as
    ``StorageError`` and leave the session usable.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Database {action} failed: {exc}") from exc

    def _get_schedule(self, schedule_id: str) -> PriceSchedule:
        with self._guard("read"):
            schedule = (
                self.db.query(PriceSchedule).filter(PriceSchedule.id == schedule_id).first()
            )
        if not schedule:
            raise NotFoundError("Price schedule", schedule_id)
        return schedule

    def _get_reading(self, reading_id: str) -> Reading:
        with self._guard("read"):
            reading = self.db.query(Reading).filter(Reading.id == reading_id).first()
        if not reading:
            raise NotFoundError("Reading", reading_id)
        return reading

    def list_schedules(self) -> list[PriceScheduleResponse]:
        with self._guard("read"):
            rows = (
                self.db.query(PriceSchedule)
                .order_by(PriceSchedule.effective_date.desc(), PriceSchedule.created_at)
                .all()
            )
        return [PriceScheduleResponse.model_validate(row) for row in rows]

    def add_schedule(self, data: PriceScheduleCreate) -> PriceScheduleResponse:
        schedule = PriceSchedule(**data.model_dump())
        with self._guard("write"):
            self.db.add(schedule)
            self.db.commit()
            self.db.refresh(schedule)
        logger.info("Added price schedule %s effective %s", schedule.id, schedule.effective_date)
        return PriceScheduleResponse.model_validate(schedule)

    def update_schedule(
        self, schedule_id: str, data: PriceScheduleUpdate
    ) -> PriceScheduleResponse:
        schedule = self._get_schedule(schedule_id)
        with self._guard("write"):
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(schedule, field, value)
            self.db.commit()
            self.db.refresh(schedule)
        logger.info("Updated price schedule %s", schedule_id)
        return PriceScheduleResponse.model_validate(schedule)

    def delete_schedule(self, schedule_id: str) -> None:
        schedule = self._get_schedule(schedule_id)
        with self._guard("write"):
            self.db.delete(schedule)
            self.db.commit()
        logger.info("Deleted price schedule %s", schedule_id)

    def list_readings(self) -> list[ReadingResponse]:
        with self._guard("read"):
            rows = self.db.query(Reading).order_by(Reading.reading_date, Reading.created_at).all()
        return [ReadingResponse.model_validate(row) for row in rows]

    def add_reading(self, data: ReadingCreate) -> ReadingResponse:
        reading = Reading(**data.model_dump())
        with self._guard("write"):
            self.db.add(reading)
            self.db.commit()
            self.db.refresh(reading)
        logger.info("Added reading %s for %s", reading.id, reading.reading_date)
        return ReadingResponse.model_validate(reading)

    def update_reading(self, reading_id: str, data: ReadingUpdate) -> ReadingResponse:
        reading = self._get_reading(reading_id)
        with self._guard("write"):
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(reading, field, value)
            self.db.commit()
            self.db.refresh(reading)
        logger.info("Updated reading %s", reading_id)
        return ReadingResponse.model_validate(reading)

    def delete_reading(self, reading_id: str) -> None:
        reading = self._get_reading(reading_id)
        with self._guard("write"):
            self.db.delete(reading)
            self.db.commit()
        logger.info("Deleted reading %s", reading_id)


class JsonRentalStore(RentalStore):
    """Store keeping both collections in a single local JSON document.

    Until the first write, reads return the demo data set.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def initialize(self) -> None:
        """Create an empty document so reads stop falling back to demo data."""
        if not self.path.exists():
            self._save({"price_schedules": [], "readings": []})

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        if not self.path.exists():
            return {
                "price_schedules": copy.deepcopy(DEMO_SCHEDULES),
                "readings": copy.deepcopy(DEMO_READINGS),
            }
        try:
            with self.path.open(encoding="utf-8") as fh:
                document = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        document.setdefault("price_schedules", [])
        document.setdefault("readings", [])
        return document

    def _save(self, document: dict[str, list[dict[str, Any]]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(document, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    @staticmethod
    def _parse(model: type[pydantic.BaseModel], items: list[dict[str, Any]]) -> list:
        try:
            return [model.model_validate(item) for item in items]
        except pydantic.ValidationError as exc:
            raise StorageError(f"Corrupt {model.__name__} record: {exc}") from exc

    @staticmethod
    def _index_of(items: list[dict[str, Any]], item_id: str, kind: str) -> int:
        for index, item in enumerate(items):
            if item.get("id") == item_id:
                return index
        raise NotFoundError(kind, item_id)

    @staticmethod
    def _new_record(data: pydantic.BaseModel) -> dict[str, Any]:
        record = data.model_dump(mode="json")
        record["id"] = str(uuid.uuid4())
        record["created_at"] = datetime.now(UTC).isoformat()
        return record

    def list_schedules(self) -> list[PriceScheduleResponse]:
        schedules = self._parse(PriceScheduleResponse, self._load()["price_schedules"])
        return sorted(schedules, key=lambda s: s.effective_date, reverse=True)

    def add_schedule(self, data: PriceScheduleCreate) -> PriceScheduleResponse:
        document = self._load()
        record = self._new_record(data)
        document["price_schedules"].append(record)
        self._save(document)
        logger.info("Added price schedule %s effective %s", record["id"], data.effective_date)
        return PriceScheduleResponse.model_validate(record)

    def update_schedule(
        self, schedule_id: str, data: PriceScheduleUpdate
    ) -> PriceScheduleResponse:
        document = self._load()
        items = document["price_schedules"]
        index = self._index_of(items, schedule_id, "Price schedule")
        items[index].update(data.model_dump(mode="json", exclude_unset=True))
        self._save(document)
        logger.info("Updated price schedule %s", schedule_id)
        return PriceScheduleResponse.model_validate(items[index])

    def delete_schedule(self, schedule_id: str) -> None:
        document = self._load()
        items = document["price_schedules"]
        del items[self._index_of(items, schedule_id, "Price schedule")]
        self._save(document)
        logger.info("Deleted price schedule %s", schedule_id)

    def list_readings(self) -> list[ReadingResponse]:
        readings = self._parse(ReadingResponse, self._load()["readings"])
        return sorted(readings, key=lambda r: r.reading_date)

    def add_reading(self, data: ReadingCreate) -> ReadingResponse:
        document = self._load()
        record = self._new_record(data)
        document["readings"].append(record)
        self._save(document)
        logger.info("Added reading %s for %s", record["id"], data.reading_date)
        return ReadingResponse.model_validate(record)

    def update_reading(self, reading_id: str, data: ReadingUpdate) -> ReadingResponse:
        document = self._load()
        items = document["readings"]
        index = self._index_of(items, reading_id, "Reading")
        items[index].update(data.model_dump(mode="json", exclude_unset=True))
        self._save(document)
        logger.info("Updated reading %s", reading_id)
        return ReadingResponse.model_validate(items[index])

    def delete_reading(self, reading_id: str) -> None:
        document = self._load()
        items = document["readings"]
        del items[self._index_of(items, reading_id, "Reading")]
        self._save(document)
        logger.info("Deleted reading %s", reading_id)
