"""Reading Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.schemas.common import Amount, IsoDate


class ReadingBase(BaseModel):
    """Base reading schema."""

    reading_date: IsoDate
    electricity_index: Amount
    water_index: Amount
    is_electricity_reset: bool = False
    is_water_reset: bool = False
    is_paid: bool = False
    note: str | None = None


class ReadingCreate(ReadingBase):
    """Schema for recording a reading, also used as the next-reading draft."""

    pass


class ReadingUpdate(BaseModel):
    """Schema for editing a reading. Omitted fields are left unchanged."""

    reading_date: IsoDate | None = None
    electricity_index: Amount | None = None
    water_index: Amount | None = None
    is_electricity_reset: bool | None = None
    is_water_reset: bool | None = None
    is_paid: bool | None = None
    note: str | None = None

    @field_validator(
        "reading_date",
        "electricity_index",
        "water_index",
        "is_electricity_reset",
        "is_water_reset",
        "is_paid",
    )
    @classmethod
    def reject_null(cls, v):
        """Only the note may be cleared with null."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ReadingResponse(ReadingBase):
    """A stored reading."""

    id: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
