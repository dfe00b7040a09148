"""Billing routes exposing computed periods."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_ledger
from app.schemas.billing import BilledPeriod, CalculationRequest, ScheduleGroup
from app.services.billing import compute_billed_periods
from app.services.ledger import RentalLedger

router = APIRouter(prefix="/billing", tags=["billing"])


@router.get("/periods", response_model=list[BilledPeriod])
def list_billed_periods(ledger: RentalLedger = Depends(get_ledger)):
    """
    Compute billed periods for all stored readings, oldest first.

    Each period carries usage since the previous reading, the schedule
    effective on its date, and the cost breakdown:
        total = electricity_usage * electricity_price + water_usage * water_price + base_rent
    """
    return ledger.billed_periods


@router.get("/latest", response_model=BilledPeriod | None)
def get_latest_bill(ledger: RentalLedger = Depends(get_ledger)):
    """Get the most recent billed period, or null when there are no readings."""
    return ledger.latest_bill()


@router.get("/groups", response_model=list[ScheduleGroup])
def list_schedule_groups(ledger: RentalLedger = Depends(get_ledger)):
    """Billed periods grouped into runs sharing the same applied schedule."""
    return ledger.grouped_periods()


@router.post("/calculate", response_model=list[BilledPeriod])
def calculate(request: CalculationRequest):
    """Compute billed periods for posted readings and schedules without storing them."""
    return compute_billed_periods(request.readings, request.schedules)
