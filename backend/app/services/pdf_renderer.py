"""Render invoices to PDF from user templates.

Templates are HTML with Jinja2 placeholders, rendered in a sandbox with
autoescaping. Unknown placeholders are errors rather than blanks. The
resulting HTML is converted to PDF by xhtml2pdf (reportlab underneath).

Available placeholders:
    invoice_number, date, currency, currency_symbol, total_amount,
    client_name, client_address, user_address,
    items (description, quantity, unit_price, use_quantity, line_total),
    issuer (email, address, company_name, company_address, registration_number)
"""

import logging
from decimal import Decimal
from io import BytesIO
from typing import Any, Dict, Optional

from jinja2 import StrictUndefined, TemplateError, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment
from xhtml2pdf import pisa

from backend.app.models.invoice import Invoice

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}

DEFAULT_TEMPLATE_HTML = """<html>
<head>
<style>
  body { font-family: Helvetica; font-size: 10pt; color: #1f2933; }
  h1 { font-size: 20pt; margin-bottom: 4pt; }
  .muted { color: #6b7280; }
  table.items { width: 100%; border-collapse: collapse; margin-top: 16pt; }
  table.items th { background-color: #e5e7eb; text-align: left; padding: 4pt; }
  table.items td { border-bottom: 0.5pt solid #d1d5db; padding: 4pt; }
  .num { text-align: right; }
  .total { font-size: 12pt; font-weight: bold; text-align: right; margin-top: 12pt; }
</style>
</head>
<body>
  <h1>Invoice {{ invoice_number }}</h1>
  <p class="muted">Date: {{ date }}</p>

  <table width="100%">
    <tr>
      <td valign="top">
        <b>From</b><br/>
        {% if issuer.company_name %}{{ issuer.company_name }}<br/>{% endif %}
        {{ user_address }}<br/>
        {% if issuer.registration_number %}Reg. no. {{ issuer.registration_number }}<br/>{% endif %}
        {{ issuer.email }}
      </td>
      <td valign="top">
        <b>Bill to</b><br/>
        {{ client_name }}<br/>
        {{ client_address }}
      </td>
    </tr>
  </table>

  <table class="items">
    <tr>
      <th>Description</th>
      <th class="num">Qty</th>
      <th class="num">Unit price</th>
      <th class="num">Amount</th>
    </tr>
    {% for item in items %}
    <tr>
      <td>{{ item.description }}</td>
      <td class="num">{% if item.use_quantity %}{{ item.quantity }}{% endif %}</td>
      <td class="num">{{ currency_symbol }} {{ item.unit_price }}</td>
      <td class="num">{{ currency_symbol }} {{ item.line_total }}</td>
    </tr>
    {% endfor %}
  </table>

  <p class="total">Total: {{ currency_symbol }} {{ total_amount }} {{ currency }}</p>
</body>
</html>
"""

_env = SandboxedEnvironment(autoescape=True, undefined=StrictUndefined)


class InvoiceRenderError(Exception):
    """Raised when an invoice cannot be rendered to PDF."""


def currency_symbol(code: Optional[str]) -> str:
    return CURRENCY_SYMBOLS.get((code or "").upper(), code or "")


def _money(value: Decimal | float | None) -> str:
    return f"{Decimal(str(value or 0)):.2f}"


def validate_template_html(html: str) -> None:
    """Raise ValueError when the template markup does not parse."""
    try:
        _env.parse(html)
    except TemplateSyntaxError as exc:
        raise ValueError(f"Invalid template syntax on line {exc.lineno}: {exc.message}") from exc


def build_invoice_context(invoice: Invoice) -> Dict[str, Any]:
    owner = invoice.owner
    company = owner.company if owner is not None else None
    items = [
        {
            "description": item.description,
            "quantity": f"{Decimal(str(item.quantity)).normalize():f}",
            "unit_price": _money(item.unit_price),
            "use_quantity": item.use_quantity,
            "line_total": _money(item.line_total),
        }
        for item in invoice.items
    ]
    return {
        "invoice_id": invoice.id,
        "invoice_number": invoice.invoice_number,
        "date": invoice.date.isoformat() if invoice.date else "",
        "currency": invoice.currency,
        "currency_symbol": currency_symbol(invoice.currency),
        "total_amount": _money(invoice.total_amount),
        "client_name": invoice.client_name,
        "client_address": invoice.client_address,
        "user_address": invoice.user_address,
        "items": items,
        "issuer": {
            "email": owner.email if owner is not None else "",
            "address": owner.address if owner is not None else "",
            "company_name": company.name if company is not None else "",
            "company_address": company.address if company is not None else "",
            "registration_number": company.registration_number if company is not None else "",
        },
    }


def render_invoice_html(invoice: Invoice, template_html: Optional[str] = None) -> str:
    source = template_html if template_html and template_html.strip() else DEFAULT_TEMPLATE_HTML
    try:
        return _env.from_string(source).render(**build_invoice_context(invoice))
    except TemplateError as exc:
        raise InvoiceRenderError(f"Template rendering failed: {exc}") from exc


def render_invoice_pdf(invoice: Invoice) -> bytes:
    """Render the invoice with its template (or the default) and return PDF bytes."""
    template_html = invoice.template.html if invoice.template is not None else None
    html = render_invoice_html(invoice, template_html)

    buffer = BytesIO()
    try:
        result = pisa.CreatePDF(src=html, dest=buffer, encoding="utf-8")
    except Exception as exc:
        raise InvoiceRenderError(f"PDF conversion failed: {exc}") from exc
    if result.err:
        raise InvoiceRenderError(f"PDF conversion reported {result.err} error(s)")

    pdf_bytes = buffer.getvalue()
    logger.debug("Rendered invoice %s to %d PDF bytes", invoice.id, len(pdf_bytes))
    return pdf_bytes
