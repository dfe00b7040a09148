"""PriceSchedule Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.schemas.common import Amount, IsoDate


class PriceScheduleBase(BaseModel):
    """Base price schedule schema."""

    effective_date: IsoDate
    electricity_price: Amount  # per kWh
    water_price: Amount  # per m3
    base_rent: Amount


class PriceScheduleCreate(PriceScheduleBase):
    """Schema for creating a price schedule."""

    pass


class PriceScheduleUpdate(BaseModel):
    """Schema for updating a price schedule. Omitted fields are left unchanged."""

    effective_date: IsoDate | None = None
    electricity_price: Amount | None = None
    water_price: Amount | None = None
    base_rent: Amount | None = None

    @field_validator("effective_date", "electricity_price", "water_price", "base_rent")
    @classmethod
    def reject_null(cls, v):
        """Omit a field to keep it; null is not a value."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class PriceScheduleResponse(PriceScheduleBase):
    """A stored price schedule."""

    id: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
