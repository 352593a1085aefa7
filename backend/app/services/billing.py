"""Billing service utilities.

Turns a supply window (start/end clock times) and a per-minute rate into the
derived invoice amounts. ``compute_invoice_amounts`` is the single place the
derived fields are produced, so duration, total and pending always move
together.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from backend.app.core.errors import BillingValidationError

MINUTES_PER_DAY = 24 * 60
CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

WHOLE_UNIT = Decimal("1")
RATE_PLACES = Decimal("0.001")
CENTS = Decimal("0.01")

# Largest values the Numeric(10, 3) rate and Numeric(12, 2) money columns hold
MAX_RATE = Decimal("9999999.999")
MAX_AMOUNT = Decimal("9999999999.99")


@dataclass(frozen=True)
class BillingResult:
    duration_minutes: int
    rate_per_minute: Decimal
    total_cost: Decimal
    amount_received: Decimal
    amount_pending: Decimal


def parse_clock(value: str | None) -> int:
    """Return minutes since midnight for ``HH:MM``; 0 for empty or malformed input."""
    if not value:
        return 0
    match = CLOCK_PATTERN.match(str(value))
    if not match:
        return 0
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return 0
    return hours * 60 + minutes


def is_valid_clock(value: str | None) -> bool:
    if not value:
        return False
    match = CLOCK_PATTERN.match(str(value))
    return bool(match) and int(match.group(1)) <= 23 and int(match.group(2)) <= 59


def minutes_between(start: str | None, end: str | None) -> int:
    """Elapsed minutes from start to end; an end before start crosses midnight."""
    start_minutes = parse_clock(start)
    end_minutes = parse_clock(end)
    if end_minutes >= start_minutes:
        diff = end_minutes - start_minutes
    else:
        diff = end_minutes - start_minutes + MINUTES_PER_DAY
    return max(0, diff)


def normalize_rate(rate_per_minute) -> Decimal:
    """Validate a per-minute rate; raise BillingValidationError unless it is a positive number."""
    if rate_per_minute is None or isinstance(rate_per_minute, bool):
        raise BillingValidationError("Rate per minute must be a positive number")
    try:
        rate = Decimal(str(rate_per_minute).strip())
    except (InvalidOperation, ValueError):
        raise BillingValidationError("Rate per minute must be a positive number")
    if not rate.is_finite() or rate <= 0:
        raise BillingValidationError("Rate per minute must be a positive number")
    if rate > MAX_RATE:
        raise BillingValidationError(f"Rate per minute cannot exceed {MAX_RATE}")
    try:
        # Rates are stored with three decimals; bill with the stored value
        rate = rate.quantize(RATE_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise BillingValidationError("Rate per minute must be a positive number")
    if rate <= 0:
        raise BillingValidationError("Rate per minute must be a positive number")
    return rate


def coerce_amount(value) -> Decimal:
    """Amounts received that are missing or not numeric count as zero.

    A negative amount, or one too large to store, raises BillingValidationError.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0.00")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0.00")
    if not amount.is_finite():
        return Decimal("0.00")
    if amount < 0:
        raise BillingValidationError("Amount received cannot be negative")
    if amount > MAX_AMOUNT:
        raise BillingValidationError(f"Amount received cannot exceed {MAX_AMOUNT}")
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise BillingValidationError("Amount received is not a valid amount")


def calculate_total_cost(duration_minutes: int, rate_per_minute: Decimal | float | str) -> Decimal:
    """Compute duration x rate rounded half-up to a whole currency unit."""
    rate = normalize_rate(rate_per_minute)
    minutes = max(0, int(duration_minutes or 0))
    try:
        total = (Decimal(minutes) * rate).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise BillingValidationError("Total cost is too large")
    if total > MAX_AMOUNT:
        raise BillingValidationError(f"Total cost cannot exceed {MAX_AMOUNT}")
    return total.quantize(CENTS)


def calculate_amount_pending(total_cost: Decimal, amount_received) -> Decimal:
    # Negative values are overpayments and are kept as-is
    total = Decimal(str(total_cost or 0))
    return (total - coerce_amount(amount_received)).quantize(CENTS)


def compute_invoice_amounts(start_time: str, end_time: str, rate_per_minute, amount_received=None) -> BillingResult:
    rate = normalize_rate(rate_per_minute)
    duration = minutes_between(start_time, end_time)
    total = calculate_total_cost(duration, rate)
    received = coerce_amount(amount_received)
    return BillingResult(
        duration_minutes=duration,
        rate_per_minute=rate,
        total_cost=total,
        amount_received=received,
        amount_pending=calculate_amount_pending(total, received),
    )


def apply_billing(invoice, result: BillingResult) -> None:
    """Copy a BillingResult onto an Invoice; all derived fields are written together."""
    invoice.rate_per_minute = result.rate_per_minute
    invoice.duration_minutes = result.duration_minutes
    invoice.total_cost = result.total_cost
    invoice.amount_received = result.amount_received
    invoice.amount_pending = result.amount_pending


def is_overpaid(amount_pending) -> bool:
    return Decimal(str(amount_pending or 0)) < 0


def payment_status(amount_pending) -> str:
    """``pending`` while money is owed, ``overpaid`` below zero, otherwise ``paid``."""
    pending = Decimal(str(amount_pending or 0))
    if pending > 0:
        return "pending"
    if pending < 0:
        return "overpaid"
    return "paid"
