from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from flask_wtf import FlaskForm
from wtforms import DecimalField, SelectField, StringField, SubmitField
from wtforms.validators import AnyOf, DataRequired, StopValidation, ValidationError

from invoicing.models import INVOICE_STATUSES, MAX_AMOUNT_CENTS

CUSTOMER_REQUIRED_MESSAGE = "Please select a customer"
AMOUNT_MESSAGE = "Please enter an amount greater than $0."
STATUS_MESSAGE = "Please select an invoice status."

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal(MAX_AMOUNT_CENTS) / 100
AMOUNT_TOO_LARGE_MESSAGE = f"Please enter an amount no greater than ${MAX_AMOUNT:,}."


class GreaterThan:
    """Require a numeric field value strictly above ``minimum``.

    Empty or unparseable input fails with the same message and stops the
    chain, so a field never reports more than one error.
    """

    def __init__(self, minimum, message=None):
        self.minimum = minimum
        self.message = message

    def __call__(self, form, field):
        data = field.data
        if data is None or not data.is_finite() or data <= self.minimum:
            message = self.message
            if message is None:
                message = field.gettext(
                    "Number must be greater than %(min)s."
                ) % dict(min=self.minimum)
            raise StopValidation(message)


class AtMost:
    """Require a numeric field value no larger than ``maximum``."""

    def __init__(self, maximum, message=None):
        self.maximum = maximum
        self.message = message

    def __call__(self, form, field):
        if field.data is not None and field.data > self.maximum:
            message = self.message
            if message is None:
                message = field.gettext(
                    "Number must be at most %(max)s."
                ) % dict(max=self.maximum)
            raise ValidationError(message)


class AmountField(DecimalField):
    """Decimal field for money amounts entered as dollars.

    Formatted input such as ``"$1,234.50"`` or ``"1 234,50"`` is accepted.
    The parsed value is quantized to whole cents (half-up) so that the
    stored cent count and the validated value always agree.
    """

    _CURRENCY_SYMBOLS = "$€£¥"

    def __init__(self, *args, render_kw=None, **kwargs):
        render_kw = dict(render_kw or {})
        render_kw.setdefault("inputmode", "decimal")
        render_kw.setdefault("step", "0.01")
        kwargs.setdefault("places", 2)
        super().__init__(*args, render_kw=render_kw, **kwargs)

    @classmethod
    def _normalise_plain_number(cls, text):
        """Return a plain numeric string for formatted monetary input."""

        cleaned = text.strip()
        while cleaned and cleaned[0] in cls._CURRENCY_SYMBOLS:
            cleaned = cleaned[1:].lstrip()
        while cleaned and cleaned[-1] in cls._CURRENCY_SYMBOLS:
            cleaned = cleaned[:-1].rstrip()

        cleaned = cleaned.replace("\u00a0", " ")

        decimal_is_comma = False
        if "," in cleaned and "." in cleaned:
            decimal_is_comma = cleaned.rfind(".") < cleaned.rfind(",")
        elif "," in cleaned:
            fractional_length = len(cleaned) - cleaned.rfind(",") - 1
            decimal_is_comma = 0 < fractional_length <= 2

        cleaned = cleaned.replace("_", "").replace(" ", "")
        if decimal_is_comma:
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
        return cleaned

    def process_formdata(self, valuelist):
        self.data = None
        if not valuelist or valuelist[0] is None:
            return
        text = str(valuelist[0]).strip()
        if not text:
            return
        try:
            value = Decimal(self._normalise_plain_number(text))
            if value.is_finite():
                value = value.quantize(CENT, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError):
            # Left for GreaterThan to report with the amount message.
            return
        self.data = value


class InvoiceForm(FlaskForm):
    """Fields shared by every invoice mutation.

    ``id`` and ``date`` are assigned by the server and are never accepted
    from a submitted form.
    """

    customer_id = StringField(
        "Customer",
        validators=[DataRequired(message=CUSTOMER_REQUIRED_MESSAGE)],
    )
    amount = AmountField(
        "Amount",
        validators=[
            GreaterThan(0, message=AMOUNT_MESSAGE),
            AtMost(MAX_AMOUNT, message=AMOUNT_TOO_LARGE_MESSAGE),
        ],
    )
    status = SelectField(
        "Status",
        choices=[(status, status.title()) for status in INVOICE_STATUSES],
        validate_choice=False,
        validators=[AnyOf(INVOICE_STATUSES, message=STATUS_MESSAGE)],
    )

    def field_errors(self):
        """Return ``{field: [messages]}`` for the invoice fields only."""
        return {
            name: list(self[name].errors)
            for name in ("customer_id", "amount", "status")
            if self[name].errors
        }


class CreateInvoiceForm(InvoiceForm):
    submit = SubmitField("Create Invoice")


class UpdateInvoiceForm(InvoiceForm):
    submit = SubmitField("Edit Invoice")


class DeleteForm(FlaskForm):
    """Simple form used for CSRF protection on delete actions."""

    submit = SubmitField("Delete")
