"""Customer service helpers."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from backend.app.models.customer import Customer
from backend.app.models.invoice import Invoice
from backend.app.schemas.customer import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


def get_owned_customer(db: Session, customer_id: int, owner_id: int) -> Customer | None:
    return db.query(Customer).filter(Customer.id == customer_id, Customer.owner_id == owner_id).first()


def list_customers(db: Session, owner_id: int, search: str | None = None) -> list[Customer]:
    query = db.query(Customer).filter(Customer.owner_id == owner_id)
    term = (search or "").strip().lower()
    if term:
        pattern = f"%{term}%"
        query = query.filter(
            or_(
                func.lower(Customer.name).like(pattern),
                func.lower(func.coalesce(Customer.contact, "")).like(pattern),
            )
        )
    return query.order_by(Customer.name.asc(), Customer.id.asc()).all()


def create_customer(db: Session, owner_id: int, payload: CustomerCreate) -> Customer:
    customer = Customer(owner_id=owner_id, name=payload.name, contact=payload.contact)
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info("Created customer %s for owner %s", customer.id, owner_id)
    return customer


def update_customer(db: Session, customer: Customer, payload: CustomerUpdate) -> Customer:
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        customer.name = changes["name"]
    if "contact" in changes:
        customer.contact = changes["contact"]
    db.commit()
    db.refresh(customer)
    return customer


def delete_customer(db: Session, customer: Customer) -> int:
    """Delete a customer together with its invoices in one transaction.

    Returns the number of invoices removed.
    """
    invoice_count = db.query(Invoice).filter(Invoice.customer_id == customer.id).count()
    customer_id = customer.id
    db.delete(customer)
    db.commit()
    logger.info("Deleted customer %s and %s invoice(s)", customer_id, invoice_count)
    return invoice_count
