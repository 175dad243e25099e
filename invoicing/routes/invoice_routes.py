from flask import (
    Blueprint,
    abort,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from invoicing import db
from invoicing.forms import CreateInvoiceForm, DeleteForm, UpdateInvoiceForm
from invoicing.models import Customer, Invoice
from invoicing.services import invoice_actions
from invoicing.services.invoice_actions import FormState
from invoicing.utils.cache import cached_view_data, revalidate_path

invoice = Blueprint("invoice", __name__, url_prefix="/dashboard/invoices")


def _wants_json():
    return request.accept_mimetypes.best == "application/json"


def _customer_choices():
    return Customer.query.order_by(Customer.name).all()


def _load_invoice_rows():
    invoices = Invoice.query.order_by(Invoice.date.desc(), Invoice.id).all()
    return [
        {
            "id": inv.id,
            "customer": inv.customer.name if inv.customer else inv.customer_id,
            "amount": f"{inv.amount_decimal:.2f}",
            "date": inv.date.isoformat(),
            "status": inv.status,
        }
        for inv in invoices
    ]


def _finish(result, success_message):
    """Apply a successful mutation: invalidate, confirm, then navigate."""
    revalidate_path(result.revalidate)
    flash(result.message or success_message, "success")
    return redirect(result.redirect_to or url_for("invoice.view_invoices"))


def _render_form(template, form, state, status=200, **context):
    return (
        render_template(
            template,
            form=form,
            state=state,
            customers=_customer_choices(),
            **context,
        ),
        status,
    )


def _form_failure(template, form_class, state, **context):
    """Answer a failed submission with the form page or, for API clients, JSON."""
    if _wants_json():
        # Validation problems are client errors; database failures are not.
        return jsonify(state.to_dict()), 400 if state.errors else 500
    form = form_class(formdata=request.form)
    status = 200 if state.errors else 500
    return _render_form(template, form, state, status, **context)


@invoice.route("")
def view_invoices():
    """List invoices, newest first."""
    rows = cached_view_data(request.path, _load_invoice_rows)
    return render_template(
        "invoices/view_invoices.html",
        invoices=rows,
        delete_form=DeleteForm(),
    )


@invoice.route("/create", methods=["GET", "POST"])
def create_invoice():
    """Create an invoice."""
    state = FormState()
    if request.method == "POST":
        result = invoice_actions.create_invoice(request.form, state)
        if not isinstance(result, FormState):
            return _finish(result, "Invoice created successfully!")
        return _form_failure(
            "invoices/create_invoice.html", CreateInvoiceForm, result
        )
    return _render_form("invoices/create_invoice.html", CreateInvoiceForm(), state)


@invoice.route("/<invoice_id>/edit", methods=["GET", "POST"])
def edit_invoice(invoice_id):
    """Edit an invoice's customer, amount and status."""
    if request.method == "POST":
        result = invoice_actions.update_invoice(invoice_id, request.form)
        if not isinstance(result, FormState):
            return _finish(result, "Invoice updated successfully!")
        return _form_failure(
            "invoices/edit_invoice.html",
            UpdateInvoiceForm,
            result,
            invoice_id=invoice_id,
        )

    existing = db.session.get(Invoice, invoice_id)
    if existing is None:
        abort(404)
    form = UpdateInvoiceForm(
        formdata=None,
        customer_id=existing.customer_id,
        amount=existing.amount_decimal,
        status=existing.status,
    )
    return _render_form(
        "invoices/edit_invoice.html", form, FormState(), invoice_id=invoice_id
    )


@invoice.route("/<invoice_id>/delete", methods=["POST"])
def delete_invoice(invoice_id):
    """Delete an invoice when deletion is enabled."""
    result = invoice_actions.delete_invoice(invoice_id)
    if isinstance(result, FormState):
        if _wants_json():
            return jsonify(result.to_dict()), 500
        flash(result.message, "danger")
        return redirect(url_for("invoice.view_invoices"))
    return _finish(result, "Invoice deleted.")
