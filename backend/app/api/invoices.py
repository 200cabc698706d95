"""Invoice routes for freelancers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.crud.crud_invoice_template import invoice_template_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.company import Company
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_template import InvoiceTemplate
from backend.app.models.user import User
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRead, InvoiceUpdate
from backend.app.services.invoices import InvoiceNumberConflict, create_invoice, update_invoice
from backend.app.services.pdf_renderer import InvoiceRenderError, render_invoice_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _get_company(db: Session, company_id: Optional[int]) -> Optional[Company]:
    if company_id is None:
        return None
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return company


def _get_owned_template(db: Session, template_id: Optional[int], owner_id: int) -> Optional[InvoiceTemplate]:
    if template_id is None:
        return None
    template = invoice_template_crud.get(db, template_id=template_id, owner_id=owner_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice template not found")
    return template


def _get_owned_invoice(db: Session, invoice_id: int, owner_id: int) -> Invoice:
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id, Invoice.owner_id == owner_id).first()
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


@router.post("", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice_for_user(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    company = _get_company(db, payload.company_id)
    template = _get_owned_template(db, payload.template_id, current_user.id)
    try:
        return create_invoice(db, owner=current_user, invoice_in=payload, company=company, template=template)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except InvoiceNumberConflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=List[InvoiceRead])
async def list_invoices(
    company_id: int | None = None,
    currency: str | None = None,
    skip: int = 0,
    limit: int = 50,
    sort_by: str = "date",
    sort_order: str = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Invoice).filter(Invoice.owner_id == current_user.id)
    if company_id:
        query = query.filter(Invoice.company_id == company_id)
    if currency:
        query = query.filter(Invoice.currency == currency.upper())

    supported_sort_fields = {
        "date": Invoice.date,
        "created_at": Invoice.created_at,
        "total_amount": Invoice.total_amount,
        "invoice_number": Invoice.invoice_number,
    }
    if sort_by not in supported_sort_fields:
        raise HTTPException(status_code=400, detail="Invalid sort_by value")
    sort_order_normalized = (sort_order or "desc").lower()
    if sort_order_normalized not in {"asc", "desc"}:
        raise HTTPException(status_code=400, detail="Invalid sort_order value")
    sort_column = supported_sort_fields[sort_by]
    if sort_order_normalized == "asc":
        order_by_clause = [sort_column.asc(), Invoice.id.asc()]
    else:
        order_by_clause = [sort_column.desc(), Invoice.id.desc()]

    query = query.order_by(*order_by_clause).offset(skip).limit(limit)
    return query.all()


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_invoice(db, invoice_id, current_user.id)


@router.patch("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice_for_user(
    invoice_id: int,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    company = _get_company(db, payload.company_id)
    template = _get_owned_template(db, payload.template_id, current_user.id)
    try:
        return update_invoice(db, invoice=invoice, invoice_in=payload, company=company, template=template)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/{invoice_id}/pdf", response_class=Response)
async def download_invoice_pdf(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    try:
        pdf_bytes = render_invoice_pdf(invoice)
    except InvoiceRenderError:
        logger.exception("Failed to render PDF for invoice %s", invoice.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to render invoice PDF")
    headers = {
        "Content-Disposition": f'attachment; filename="invoice-{invoice.id}.pdf"'
    }
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)
