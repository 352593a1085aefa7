from decimal import Decimal

from backend.app.models.business_settings import BusinessSettings
from backend.app.models.customer import Customer
from backend.app.models.invoice import Invoice
from backend.app.models.user import User


def test_user_model_has_columns():
    column_names = {column.name for column in User.__table__.columns}
    assert {"id", "email", "hashed_password", "is_active", "created_at"}.issubset(column_names)


def test_invoice_model_has_billing_columns():
    column_names = {column.name for column in Invoice.__table__.columns}
    expected = {
        "customer_id",
        "date",
        "start_time",
        "end_time",
        "rate_per_minute",
        "duration_minutes",
        "total_cost",
        "amount_received",
        "amount_pending",
        "created_at",
        "updated_at",
    }
    assert expected.issubset(column_names)
    assert Invoice.__table__.columns["customer_id"].nullable is False


def test_customer_invoices_cascade_on_delete():
    cascade = Customer.__mapper__.relationships["invoices"].cascade
    assert cascade.delete and cascade.delete_orphan


def test_business_settings_unique_per_owner():
    constraints = {c.name for c in BusinessSettings.__table__.constraints}
    assert "uq_business_settings_owner" in constraints


def test_invoice_payment_status_property():
    assert Invoice(amount_pending=Decimal("5")).payment_status == "pending"
    assert Invoice(amount_pending=Decimal("-5")).payment_status == "overpaid"
    assert Invoice(amount_pending=Decimal("0")).payment_status == "paid"


def test_timestamps_are_timezone_aware():
    for model in (User, Customer, Invoice, BusinessSettings):
        columns = model.__table__.columns
        assert columns["created_at"].type.timezone is True
        if "updated_at" in columns:
            assert columns["updated_at"].type.timezone is True
