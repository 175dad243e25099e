"""Create, update and delete actions for invoices.

Each action validates the submitted fields, performs a single write and
returns its outcome as data:

* :class:`FormState` when the form must be shown again, either with
  per-field validation errors or with a database failure message.
* :class:`MutationResult` when the write succeeded.  It names the cached
  path to invalidate and, when relevant, where the client should be sent
  next.  Performing the invalidation and the redirect is left to the
  caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Union

from flask import current_app
from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError

from invoicing import db
from invoicing.forms import CreateInvoiceForm, UpdateInvoiceForm
from invoicing.models import Invoice, utc_today

INVOICES_PATH = "/dashboard/invoices"


class OperationDisabledError(NotImplementedError):
    """Raised when an action is switched off by configuration."""


@dataclass
class FormState:
    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: Optional[str] = None

    def to_dict(self):
        data = {"message": self.message}
        if self.errors:
            data["errors"] = self.errors
        return data


@dataclass(frozen=True)
class MutationResult:
    revalidate: str
    redirect_to: Optional[str] = None
    message: Optional[str] = None


ActionResult = Union[FormState, MutationResult]


def to_cents(amount: Decimal) -> int:
    """Convert a dollar amount to whole cents, rounding half up."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def create_invoice(formdata, prev_state: Optional[FormState] = None) -> ActionResult:
    """Validate ``formdata`` and insert a new invoice.

    ``prev_state`` is the result of the previous submission of the same
    form.  It is accepted so the form page can pass it straight through;
    each submission is validated on its own.
    """
    form = CreateInvoiceForm(formdata=formdata, meta={"csrf": False})
    if not form.validate():
        return FormState(
            errors=form.field_errors(),
            message="Missing Fields. Failed to Create Invoice.",
        )

    invoice = Invoice(
        customer_id=form.customer_id.data.strip(),
        amount=to_cents(form.amount.data),
        status=form.status.data,
        date=utc_today(),
    )
    try:
        db.session.add(invoice)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception(
            "Failed to create invoice for customer %s", invoice.customer_id
        )
        return FormState(message="Database Error: Failed to Create Invoice.")

    current_app.logger.info("Created invoice %s", invoice.id)
    return MutationResult(revalidate=INVOICES_PATH, redirect_to=INVOICES_PATH)


def update_invoice(invoice_id: str, formdata) -> ActionResult:
    """Validate ``formdata`` and overwrite the mutable invoice fields.

    Only ``customer_id``, ``amount`` and ``status`` change; ``id`` and
    ``date`` are left alone.  An id that matches no row is not an error.
    """
    form = UpdateInvoiceForm(formdata=formdata, meta={"csrf": False})
    if not form.validate():
        return FormState(
            errors=form.field_errors(),
            message="Missing Fields. Failed to Update Invoice.",
        )

    statement = (
        update(Invoice)
        .where(Invoice.id == invoice_id)
        .values(
            customer_id=form.customer_id.data.strip(),
            amount=to_cents(form.amount.data),
            status=form.status.data,
        )
    )
    try:
        result = db.session.execute(statement)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to update invoice %s", invoice_id)
        return FormState(message="Database Error: Failed to Update Invoice.")

    if result.rowcount == 0:
        current_app.logger.warning("Update matched no invoice with id %s", invoice_id)
    else:
        current_app.logger.info("Updated invoice %s", invoice_id)
    return MutationResult(revalidate=INVOICES_PATH, redirect_to=INVOICES_PATH)


def delete_invoice(invoice_id: str) -> ActionResult:
    """Delete an invoice when ``INVOICE_DELETE_ENABLED`` is set.

    Raises :class:`OperationDisabledError` before touching the database
    otherwise.
    """
    if not current_app.config.get("INVOICE_DELETE_ENABLED", False):
        raise OperationDisabledError("Deleting invoices is not enabled.")

    try:
        db.session.execute(delete(Invoice).where(Invoice.id == invoice_id))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete invoice %s", invoice_id)
        return FormState(message="Database Error: Failed to Delete Invoice.")

    current_app.logger.info("Deleted invoice %s", invoice_id)
    return MutationResult(revalidate=INVOICES_PATH, message="Deleted Invoice.")
