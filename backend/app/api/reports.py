"""Reporting endpoints: revenue, expenses and net over a window or a year."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.time import utc_now
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.reports import ReportSummary, YearlyTotals
from backend.app.services.reports import get_report_summary, get_yearly_totals

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummary)
async def report_summary(
    start_date: date | None = None,
    end_date: date | None = None,
    currency: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return get_report_summary(
            db,
            current_user.id,
            start_date=start_date,
            end_date=end_date,
            currency=currency.upper() if currency else None,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/yearly", response_model=YearlyTotals)
async def yearly_totals(
    year: int | None = None,
    currency: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    effective_year = year or utc_now().year
    try:
        return get_yearly_totals(db, current_user.id, effective_year, currency=currency.upper() if currency else None)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
