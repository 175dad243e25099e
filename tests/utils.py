"""Utility helpers shared across the test-suite."""

from __future__ import annotations

import re
from typing import Any

from invoicing import db
from invoicing.models import Invoice

_CSRF_RE = re.compile(r'name=["\']csrf_token["\'][^>]*value=["\']([^"\']+)["\']', re.IGNORECASE)


def extract_csrf_token(response: Any, *, required: bool = True) -> str:
    """Return the first CSRF token found in ``response`` HTML content."""

    if hasattr(response, "data"):
        html: str = response.data.decode("utf-8")
    elif isinstance(response, (bytes, bytearray)):
        html = response.decode("utf-8")
    else:
        html = str(response)
    match = _CSRF_RE.search(html)
    if not match:
        if required:
            raise AssertionError("CSRF token not found in response")
        return ""
    return match.group(1)


def add_invoice(customer_id: str, amount: int = 1000, status: str = "pending") -> str:
    """Insert an invoice directly and return its id. Needs an app context."""

    invoice = Invoice(customer_id=customer_id, amount=amount, status=status)
    db.session.add(invoice)
    db.session.commit()
    return invoice.id
