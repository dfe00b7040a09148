"""Price schedule routes."""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_ledger
from app.schemas.price_schedule import (
    PriceScheduleCreate,
    PriceScheduleResponse,
    PriceScheduleUpdate,
)
from app.services.ledger import RentalLedger

router = APIRouter(prefix="/schedules", tags=["price-schedules"])


@router.get("/", response_model=list[PriceScheduleResponse])
def list_schedules(ledger: RentalLedger = Depends(get_ledger)):
    """List price schedules, most recent effective date first."""
    return ledger.schedules


@router.post(
    "/",
    response_model=PriceScheduleResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_schedule(
    schedule_data: PriceScheduleCreate,
    ledger: RentalLedger = Depends(get_ledger),
):
    """Create a price schedule effective from its date until superseded."""
    return ledger.add_schedule(schedule_data)


@router.patch("/{schedule_id}", response_model=PriceScheduleResponse)
def update_schedule(
    schedule_id: str,
    schedule_data: PriceScheduleUpdate,
    ledger: RentalLedger = Depends(get_ledger),
):
    """Update a price schedule."""
    return ledger.update_schedule(schedule_id, schedule_data)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    schedule_id: str,
    ledger: RentalLedger = Depends(get_ledger),
) -> None:
    """Delete a price schedule. Affected periods are repriced on the next read."""
    ledger.delete_schedule(schedule_id)
