"""Invoice lifecycle: create, edit with full recompute, delete, and summaries."""

import logging
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.app.models.customer import Customer
from backend.app.models.invoice import Invoice
from backend.app.schemas.invoice import InvoiceCreate, InvoicePreviewRequest, InvoiceUpdate
from backend.app.services.billing import BillingResult, apply_billing, compute_invoice_amounts
from backend.app.services.business_settings import get_or_create_business_settings

logger = logging.getLogger(__name__)


def _default_rate(db: Session, owner_id: int) -> Decimal:
    return get_or_create_business_settings(db, owner_id).rate_per_minute


def get_owned_invoice(db: Session, invoice_id: int, owner_id: int) -> Invoice | None:
    return db.query(Invoice).filter(Invoice.id == invoice_id, Invoice.owner_id == owner_id).first()


def list_invoices(db: Session, owner_id: int, customer_id: int | None = None) -> list[Invoice]:
    """Owner's invoices, newest supply date first."""
    query = db.query(Invoice).filter(Invoice.owner_id == owner_id)
    if customer_id is not None:
        query = query.filter(Invoice.customer_id == customer_id)
    return query.order_by(Invoice.date.desc(), Invoice.created_at.desc(), Invoice.id.desc()).all()


def preview_invoice(db: Session, owner_id: int, payload: InvoicePreviewRequest) -> BillingResult:
    rate = payload.rate_per_minute if payload.rate_per_minute is not None else _default_rate(db, owner_id)
    return compute_invoice_amounts(payload.start_time, payload.end_time, rate, payload.amount_received)


def create_invoice(db: Session, owner_id: int, customer: Customer, payload: InvoiceCreate) -> Invoice:
    """Persist a new invoice; the settings rate is frozen in when none is given.

    Raises BillingValidationError for a non-positive rate.
    """
    rate = payload.rate_per_minute if payload.rate_per_minute is not None else _default_rate(db, owner_id)
    result = compute_invoice_amounts(payload.start_time, payload.end_time, rate, payload.amount_received)

    invoice = Invoice(
        owner_id=owner_id,
        customer_id=customer.id,
        date=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )
    apply_billing(invoice, result)
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    logger.info(
        "Created invoice %s for customer %s: %s min, total %s",
        invoice.id,
        customer.id,
        invoice.duration_minutes,
        invoice.total_cost,
    )
    return invoice


def update_invoice(db: Session, invoice: Invoice, payload: InvoiceUpdate) -> Invoice:
    """Merge edits onto the stored invoice and recompute every derived field."""
    provided = payload.model_dump(exclude_unset=True)
    changes = {key: value for key, value in provided.items() if value is not None}

    start_time = changes.get("start_time", invoice.start_time)
    end_time = changes.get("end_time", invoice.end_time)
    rate = changes.get("rate_per_minute", invoice.rate_per_minute)
    # An explicit null clears the payment to 0, same as on create
    received = provided["amount_received"] if "amount_received" in provided else invoice.amount_received
    result = compute_invoice_amounts(start_time, end_time, rate, received)

    if "date" in changes:
        invoice.date = changes["date"]
    invoice.start_time = start_time
    invoice.end_time = end_time
    apply_billing(invoice, result)
    db.commit()
    db.refresh(invoice)
    logger.info("Updated invoice %s: %s min, total %s", invoice.id, invoice.duration_minutes, invoice.total_cost)
    return invoice


def delete_invoice(db: Session, invoice: Invoice) -> None:
    invoice_id = invoice.id
    db.delete(invoice)
    db.commit()
    logger.info("Deleted invoice %s", invoice_id)


def get_invoice_summary(db: Session, owner_id: int, customer_id: int | None = None) -> dict:
    """Totals billed, received and pending across an owner's invoices."""
    query = db.query(
        func.count(Invoice.id),
        func.coalesce(func.sum(Invoice.total_cost), 0),
        func.coalesce(func.sum(Invoice.amount_received), 0),
        func.coalesce(func.sum(Invoice.amount_pending), 0),
    ).filter(Invoice.owner_id == owner_id)
    if customer_id is not None:
        query = query.filter(Invoice.customer_id == customer_id)
    count, billed, received, pending = query.one()

    def _money(value) -> Decimal:
        return Decimal(str(value or 0)).quantize(Decimal("0.01"))

    return {
        "invoice_count": count or 0,
        "total_billed": _money(billed),
        "total_received": _money(received),
        "total_pending": _money(pending),
    }
