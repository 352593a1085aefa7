"""Invoice routes for tanker operators."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from backend.app.core.errors import BillingValidationError
from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.models.invoice import Invoice
from backend.app.models.user import User
from backend.app.schemas.invoice import (
    BillingPreview,
    InvoiceCreate,
    InvoicePreviewRequest,
    InvoiceRead,
    InvoiceSummary,
    InvoiceUpdate,
)
from backend.app.services.billing import payment_status
from backend.app.services.business_settings import get_or_create_business_settings
from backend.app.services.customers import get_owned_customer
from backend.app.services.invoice_export_service import build_invoice_print_html
from backend.app.services.invoices import (
    create_invoice,
    delete_invoice,
    get_invoice_summary,
    get_owned_invoice,
    list_invoices,
    preview_invoice,
    update_invoice,
)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _get_owned_invoice(db: Session, invoice_id: int, owner_id: int) -> Invoice:
    invoice = get_owned_invoice(db, invoice_id, owner_id)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


def _unprocessable(exc: BillingValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


@router.get("/summary", response_model=InvoiceSummary)
async def get_summary(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_invoice_summary(db, current_user.id)


@router.post("/preview", response_model=BillingPreview)
async def preview(
    payload: InvoicePreviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        result = preview_invoice(db, current_user.id, payload)
    except BillingValidationError as exc:
        raise _unprocessable(exc)
    return BillingPreview(
        duration_minutes=result.duration_minutes,
        rate_per_minute=result.rate_per_minute,
        total_cost=result.total_cost,
        amount_received=result.amount_received,
        amount_pending=result.amount_pending,
        payment_status=payment_status(result.amount_pending),
    )


@router.get("/", response_model=List[InvoiceRead])
async def get_invoices(
    customer_id: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_invoices(db, current_user.id, customer_id=customer_id)


@router.post("/", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def add_invoice(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    customer = get_owned_customer(db, payload.customer_id, current_user.id)
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    try:
        return create_invoice(db, current_user.id, customer, payload)
    except BillingValidationError as exc:
        raise _unprocessable(exc)


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_invoice(db, invoice_id, current_user.id)


@router.patch("/{invoice_id}", response_model=InvoiceRead)
async def edit_invoice(
    invoice_id: int,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    try:
        return update_invoice(db, invoice, payload)
    except BillingValidationError as exc:
        raise _unprocessable(exc)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    delete_invoice(db, invoice)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{invoice_id}/print", response_class=HTMLResponse)
async def print_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    business = get_or_create_business_settings(db, current_user.id)
    return HTMLResponse(content=build_invoice_print_html(invoice, invoice.customer, business))
