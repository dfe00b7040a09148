"""Reading routes for the monthly meter ledger."""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_ledger
from app.schemas.reading import ReadingCreate, ReadingResponse, ReadingUpdate
from app.services.ledger import RentalLedger

router = APIRouter(prefix="/readings", tags=["readings"])


@router.get("/", response_model=list[ReadingResponse])
def list_readings(ledger: RentalLedger = Depends(get_ledger)):
    """List readings, oldest first."""
    return ledger.readings


@router.post(
    "/",
    response_model=ReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reading(
    reading_data: ReadingCreate,
    ledger: RentalLedger = Depends(get_ledger),
):
    """Record a meter reading for a billing period."""
    return ledger.add_reading(reading_data)


@router.get("/suggestion", response_model=ReadingCreate | None)
def suggest_next_reading(ledger: RentalLedger = Depends(get_ledger)):
    """
    Draft the next reading.

    Dated one month after the latest reading, with its indices as defaults.
    Returns null when no reading exists yet.
    """
    return ledger.suggest_next_reading()


@router.patch("/{reading_id}", response_model=ReadingResponse)
def update_reading(
    reading_id: str,
    reading_data: ReadingUpdate,
    ledger: RentalLedger = Depends(get_ledger),
):
    """Edit a reading."""
    return ledger.update_reading(reading_id, reading_data)


@router.delete("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reading(
    reading_id: str,
    ledger: RentalLedger = Depends(get_ledger),
) -> None:
    """Delete a reading. Later periods take their baseline from the one before."""
    ledger.delete_reading(reading_id)


@router.post("/{reading_id}/toggle-paid", response_model=ReadingResponse)
def toggle_paid(
    reading_id: str,
    ledger: RentalLedger = Depends(get_ledger),
):
    """Flip the paid status of a reading."""
    return ledger.toggle_paid(reading_id)
