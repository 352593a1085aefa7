"""Customer endpoints, including the customer's invoice history export."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.models.customer import Customer
from backend.app.models.user import User
from backend.app.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from backend.app.schemas.invoice import InvoiceRead, InvoiceSummary
from backend.app.services.business_settings import get_or_create_business_settings
from backend.app.services.customers import (
    create_customer,
    delete_customer,
    get_owned_customer,
    list_customers,
    update_customer,
)
from backend.app.services.invoice_export_service import (
    attachment_header,
    build_customer_history_pdf,
    history_filename,
)
from backend.app.services.invoices import get_invoice_summary, list_invoices

router = APIRouter(prefix="/customers", tags=["customers"])


def _get_owned_customer(db: Session, customer_id: int, owner_id: int) -> Customer:
    customer = get_owned_customer(db, customer_id, owner_id)
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.post("/", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def add_customer(
    payload: CustomerCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return create_customer(db, current_user.id, payload)


@router.get("/", response_model=List[CustomerRead])
async def get_customers(
    search: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_customers(db, current_user.id, search=search)


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(customer_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_customer(db, customer_id, current_user.id)


@router.patch("/{customer_id}", response_model=CustomerRead)
async def edit_customer(
    customer_id: int,
    payload: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    customer = _get_owned_customer(db, customer_id, current_user.id)
    return update_customer(db, customer, payload)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_customer(customer_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    customer = _get_owned_customer(db, customer_id, current_user.id)
    delete_customer(db, customer)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{customer_id}/invoices", response_model=List[InvoiceRead])
async def get_customer_invoices(
    customer_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    _get_owned_customer(db, customer_id, current_user.id)
    return list_invoices(db, current_user.id, customer_id=customer_id)


@router.get("/{customer_id}/summary", response_model=InvoiceSummary)
async def get_customer_summary(
    customer_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    _get_owned_customer(db, customer_id, current_user.id)
    return get_invoice_summary(db, current_user.id, customer_id=customer_id)


@router.get("/{customer_id}/invoices/export.pdf")
async def export_customer_history(
    customer_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    customer = _get_owned_customer(db, customer_id, current_user.id)
    invoices = list_invoices(db, current_user.id, customer_id=customer_id)
    business = get_or_create_business_settings(db, current_user.id)
    content = build_customer_history_pdf(customer, invoices, business)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": attachment_header(
                history_filename(customer), history_filename(customer, ascii_only=True)
            )
        },
    )
