"""Invoice write helpers: line items, totals and snapshot fields."""

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.models.company import Company
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_template import InvoiceTemplate
from backend.app.models.line_item import LineItem
from backend.app.models.user import User
from backend.app.schemas.invoice import InvoiceCreate, InvoiceUpdate
from backend.app.schemas.line_item import LineItemCreate
from backend.app.services.invoice_totals import calculate_invoice_total, calculate_line_total

logger = logging.getLogger(__name__)

NUMBER_ATTEMPTS = 3


def next_invoice_number(db: Session, owner_id: int) -> str:
    """Return the next per-owner invoice number, e.g. IN-00001."""
    count = db.query(func.count(Invoice.id)).filter(Invoice.owner_id == owner_id).scalar() or 0
    return f"IN-{count + 1:05d}"


def build_line_items(items_in: Optional[Sequence[LineItemCreate]]) -> List[LineItem]:
    if not items_in:
        raise ValueError("At least one line item is required")
    items: List[LineItem] = []
    for position, item_in in enumerate(items_in):
        items.append(
            LineItem(
                position=position,
                description=item_in.description.strip(),
                quantity=item_in.quantity,
                unit_price=item_in.unit_price,
                use_quantity=item_in.use_quantity,
                line_total=calculate_line_total(item_in.quantity, item_in.unit_price, item_in.use_quantity),
            )
        )
    return items


def _resolve_client(
    company: Optional[Company],
    client_name: Optional[str],
    client_address: Optional[str],
) -> Tuple[str, str]:
    name = client_name.strip() if client_name and client_name.strip() else None
    address = client_address.strip() if client_address is not None else None
    if company is not None:
        name = name or company.name
        if address is None:
            address = company.address
    if not name:
        raise ValueError("Client name is required")
    return name, address or ""


class InvoiceNumberConflict(Exception):
    """Raised when no free invoice number could be claimed."""


def create_invoice(
    db: Session,
    *,
    owner: User,
    invoice_in: InvoiceCreate,
    company: Optional[Company] = None,
    template: Optional[InvoiceTemplate] = None,
) -> Invoice:
    if not owner.address or not owner.address.strip():
        raise ValueError("User address is required")
    build_line_items(invoice_in.items)
    client_name, client_address = _resolve_client(company, invoice_in.client_name, invoice_in.client_address)
    owner_id, user_address = owner.id, owner.address
    company_id = company.id if company is not None else None
    template_id = template.id if template is not None else None

    # A concurrent create can claim the same number first; the unique
    # constraint rejects ours and we retry with a fresh count.
    for attempt in range(1, NUMBER_ATTEMPTS + 1):
        items = build_line_items(invoice_in.items)
        invoice = Invoice(
            owner_id=owner_id,
            invoice_number=next_invoice_number(db, owner_id),
            company_id=company_id,
            template_id=template_id,
            client_name=client_name,
            client_address=client_address,
            user_address=user_address,
            currency=invoice_in.currency,
            date=invoice_in.date,
            total_amount=calculate_invoice_total(item.line_total for item in items),
            items=items,
        )
        db.add(invoice)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Invoice number %s taken for user %s (attempt %d)", invoice.invoice_number, owner_id, attempt
            )
            continue
        db.refresh(invoice)
        logger.info(
            "Created invoice %s (%s) for user %s, total %s %s",
            invoice.id,
            invoice.invoice_number,
            owner_id,
            invoice.total_amount,
            invoice.currency,
        )
        return invoice
    raise InvoiceNumberConflict("Could not allocate an invoice number, please retry")


def update_invoice(
    db: Session,
    *,
    invoice: Invoice,
    invoice_in: InvoiceUpdate,
    company: Optional[Company] = None,
    template: Optional[InvoiceTemplate] = None,
) -> Invoice:
    """Apply a partial update; supplied items replace all existing lines."""
    update_data = invoice_in.model_dump(exclude_unset=True)

    new_items = build_line_items(invoice_in.items) if "items" in update_data else None
    if invoice_in.client_name is not None and not invoice_in.client_name.strip():
        raise ValueError("Client name is required")

    if "company_id" in update_data:
        invoice.company_id = company.id if company is not None else None
        if company is not None:
            invoice.client_name = company.name
            invoice.client_address = company.address
    if "template_id" in update_data:
        invoice.template_id = template.id if template is not None else None
    if invoice_in.client_name is not None:
        invoice.client_name = invoice_in.client_name.strip()
    if invoice_in.client_address is not None:
        invoice.client_address = invoice_in.client_address.strip()
    if invoice_in.currency is not None:
        invoice.currency = invoice_in.currency
    if invoice_in.date is not None:
        invoice.date = invoice_in.date
    if new_items is not None:
        invoice.items = new_items
        invoice.total_amount = calculate_invoice_total(item.line_total for item in new_items)

    db.commit()
    db.refresh(invoice)
    logger.info("Updated invoice %s for user %s, total %s", invoice.id, invoice.owner_id, invoice.total_amount)
    return invoice
