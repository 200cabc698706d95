"""Revenue and expense reporting helpers.

Totals are only meaningful in a single currency. Without an explicit
currency filter, a report covering records in more than one currency is
rejected with ValueError.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from backend.app.models.expense import Expense
from backend.app.models.invoice import Invoice

ZERO = Decimal("0.00")


def _fmt(value: Decimal) -> str:
    return str(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def _month_range(start: date, end: date) -> List[str]:
    if start > end:
        start, end = end, start
    months = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append(f"{year:04d}-{month:02d}")
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months


def _report_currency(invoice_query: Query, expense_query: Query, currency: Optional[str]) -> Optional[str]:
    if currency:
        return currency
    found = {row[0] for row in invoice_query.with_entities(Invoice.currency).distinct()}
    found |= {row[0] for row in expense_query.with_entities(Expense.currency).distinct()}
    if len(found) > 1:
        raise ValueError(f"Multiple currencies present ({', '.join(sorted(found))}); pass a currency filter")
    return found.pop() if found else None


def get_report_summary(
    db: Session,
    owner_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    currency: Optional[str] = None,
) -> dict:
    """Totals and a monthly revenue series for invoices/expenses dated in the window."""
    invoice_query = db.query(Invoice).filter(Invoice.owner_id == owner_id)
    expense_query = db.query(Expense).filter(Expense.owner_id == owner_id)
    if start_date:
        invoice_query = invoice_query.filter(Invoice.date >= start_date)
        expense_query = expense_query.filter(Expense.date >= start_date)
    if end_date:
        invoice_query = invoice_query.filter(Invoice.date <= end_date)
        expense_query = expense_query.filter(Expense.date <= end_date)

    currency = _report_currency(invoice_query, expense_query, currency)
    if currency:
        invoice_query = invoice_query.filter(Invoice.currency == currency)
        expense_query = expense_query.filter(Expense.currency == currency)

    invoices = invoice_query.all()
    expenses = expense_query.all()

    total_revenue = sum((Decimal(str(inv.total_amount or 0)) for inv in invoices), ZERO)
    total_expenses = sum((Decimal(str(exp.amount or 0)) for exp in expenses), ZERO)
    average = total_revenue / len(invoices) if invoices else ZERO

    revenue_by_month: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for inv in invoices:
        revenue_by_month[_month_key(inv.date)] += Decimal(str(inv.total_amount or 0))

    if start_date and end_date:
        months = _month_range(start_date, end_date)
    else:
        months = sorted(revenue_by_month.keys())

    return {
        "start_date": start_date,
        "end_date": end_date,
        "currency": currency,
        "invoice_count": len(invoices),
        "total_revenue": _fmt(total_revenue),
        "total_expenses": _fmt(total_expenses),
        "net": _fmt(total_revenue - total_expenses),
        "average_invoice": _fmt(average),
        "monthly_revenue": [
            {"month": month, "revenue": _fmt(revenue_by_month.get(month, ZERO))} for month in months
        ],
    }


def get_yearly_totals(db: Session, owner_id: int, year: int, currency: Optional[str] = None) -> dict:
    start, end = date(year, 1, 1), date(year, 12, 31)

    invoice_query = db.query(Invoice).filter(
        Invoice.owner_id == owner_id, Invoice.date >= start, Invoice.date <= end
    )
    expense_query = db.query(Expense).filter(
        Expense.owner_id == owner_id, Expense.date >= start, Expense.date <= end
    )
    currency = _report_currency(invoice_query, expense_query, currency)
    if currency:
        invoice_query = invoice_query.filter(Invoice.currency == currency)
        expense_query = expense_query.filter(Expense.currency == currency)

    revenue_total = invoice_query.with_entities(func.coalesce(func.sum(Invoice.total_amount), 0)).scalar()
    expense_total = expense_query.with_entities(func.coalesce(func.sum(Expense.amount), 0)).scalar()

    # Ensure Decimals regardless of what the backend's SUM returns
    revenue = Decimal(str(revenue_total or 0))
    expenses = Decimal(str(expense_total or 0))
    return {
        "year": year,
        "currency": currency,
        "total_revenue": _fmt(revenue),
        "total_expenses": _fmt(expenses),
        "net": _fmt(revenue - expenses),
    }
