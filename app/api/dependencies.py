"""API dependencies wiring storage and the ledger into request handlers."""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.services.ledger import RentalLedger
from app.services.storage import JsonRentalStore, RentalStore, SqlRentalStore


def get_store(db: Session = Depends(get_db)) -> RentalStore:
    """Build the store selected by STORAGE_BACKEND for this request."""
    if settings.STORAGE_BACKEND == "json":
        return JsonRentalStore(settings.JSON_STORE_PATH)
    return SqlRentalStore(db)


def get_ledger(store: RentalStore = Depends(get_store)) -> RentalLedger:
    """Ledger loaded with the current readings and price schedules."""
    return RentalLedger(store).load()
