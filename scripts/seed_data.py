"""Seed script to populate storage with the demo price schedule and readings."""

import logging

from app.core.config import settings
from app.core.database import SessionLocal, init_db
from app.core.logging import setup_logging
from app.schemas.price_schedule import PriceScheduleCreate
from app.schemas.reading import ReadingCreate
from app.services.ledger import RentalLedger
from app.services.storage import (
    DEMO_READINGS,
    DEMO_SCHEDULES,
    JsonRentalStore,
    RentalStore,
    SqlRentalStore,
)

logger = logging.getLogger(__name__)


def seed_store(store: RentalStore) -> RentalLedger:
    """Write the demo data set into an empty store."""
    ledger = RentalLedger(store).load()
    if ledger.readings or ledger.schedules:
        logger.info("Store already has data. Skipping seed.")
        return ledger

    for schedule in DEMO_SCHEDULES:
        ledger.add_schedule(PriceScheduleCreate.model_validate(schedule))
    for reading in DEMO_READINGS:
        ledger.add_reading(ReadingCreate.model_validate(reading))
    logger.info(
        "Seeded %d price schedules and %d readings",
        len(ledger.schedules),
        len(ledger.readings),
    )
    return ledger


def main() -> None:
    setup_logging()
    if settings.STORAGE_BACKEND == "json":
        store = JsonRentalStore(settings.JSON_STORE_PATH)
        store.initialize()
        ledger = seed_store(store)
    else:
        init_db()
        db = SessionLocal()
        try:
            ledger = seed_store(SqlRentalStore(db))
        finally:
            db.close()

    latest = ledger.latest_bill()
    if latest:
        logger.info("Latest bill %s: total %s", latest.reading_date, latest.total_amount)


if __name__ == "__main__":
    main()
