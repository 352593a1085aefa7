"""Invoice model for a single timed water supply."""

from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base
from backend.app.services import billing


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    rate_per_minute = Column(Numeric(10, 3), nullable=False)

    # Derived together by services.billing.compute_invoice_amounts
    duration_minutes = Column(Integer, nullable=False, default=0)
    total_cost = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    amount_received = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    amount_pending = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    customer = relationship("Customer", back_populates="invoices")
    owner = relationship("User", back_populates="invoices")

    @property
    def payment_status(self) -> str:
        return billing.payment_status(self.amount_pending)
