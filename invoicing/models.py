from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from invoicing import db

INVOICE_STATUSES = ("pending", "paid")

# Largest value a 32-bit INTEGER amount column holds.
MAX_AMOUNT_CENTS = 2**31 - 1


def _new_id() -> str:
    return str(uuid4())


def utc_today() -> date:
    """Return the current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


class Customer(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)

    invoices = db.relationship("Invoice", backref="customer", lazy=True)


class Invoice(db.Model):
    __tablename__ = "invoices"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    customer_id = db.Column(
        db.String(36), db.ForeignKey("customers.id"), nullable=False, index=True
    )
    # Stored as a whole number of cents.
    amount = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(16), nullable=False)
    date = db.Column(db.Date, nullable=False, default=utc_today, index=True)

    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_invoices_amount_positive"),
        db.CheckConstraint(
            "status IN ('pending', 'paid')", name="ck_invoices_status"
        ),
    )

    @property
    def amount_decimal(self) -> Decimal:
        """Amount in currency units, exact to the cent."""
        return Decimal(self.amount) / 100

    def to_dict(self):
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "amount": self.amount,
            "status": self.status,
            "date": self.date.isoformat(),
        }
