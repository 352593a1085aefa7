"""Invoice schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.core.time import utc_today
from backend.app.services.billing import coerce_amount, is_valid_clock, parse_clock

# Alias so the `date` field name does not shadow its own type
SupplyDate = date


def _clean_clock(value):
    if value is None:
        return value
    if not is_valid_clock(value):
        raise ValueError("Time must be in HH:MM format")
    minutes = parse_clock(value)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class InvoiceTimes(BaseModel):
    @field_validator("start_time", "end_time", mode="before", check_fields=False)
    @classmethod
    def normalize_clock(cls, v):
        return _clean_clock(v)

    @field_validator("amount_received", mode="before", check_fields=False)
    @classmethod
    def lenient_amount(cls, v):
        if v is None:
            return v
        return coerce_amount(v)


class InvoiceCreate(InvoiceTimes):
    customer_id: int
    date: SupplyDate = Field(default_factory=utc_today)
    start_time: str
    end_time: str
    # Falls back to the owner's settings rate when omitted
    rate_per_minute: Optional[Decimal] = None
    amount_received: Optional[Decimal] = Decimal("0.00")


class InvoiceUpdate(InvoiceTimes):
    date: Optional[SupplyDate] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    rate_per_minute: Optional[Decimal] = None
    amount_received: Optional[Decimal] = None


class InvoicePreviewRequest(InvoiceTimes):
    start_time: str
    end_time: str
    rate_per_minute: Optional[Decimal] = None
    amount_received: Optional[Decimal] = Decimal("0.00")


class BillingPreview(BaseModel):
    duration_minutes: int
    rate_per_minute: Decimal
    total_cost: Decimal
    amount_received: Decimal
    amount_pending: Decimal
    payment_status: str


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    customer_id: int

    date: SupplyDate
    start_time: str
    end_time: str
    rate_per_minute: Decimal
    duration_minutes: int
    total_cost: Decimal
    amount_received: Decimal
    amount_pending: Decimal
    payment_status: str

    created_at: datetime
    updated_at: datetime


class InvoiceSummary(BaseModel):
    invoice_count: int
    total_billed: Decimal
    total_received: Decimal
    total_pending: Decimal
