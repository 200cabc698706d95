"""Reporting schemas for revenue and expense summaries."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class MonthlyRevenue(BaseModel):
    month: str
    revenue: str


class ReportSummary(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    currency: Optional[str] = None
    invoice_count: int
    total_revenue: str
    total_expenses: str
    net: str
    average_invoice: str
    monthly_revenue: List[MonthlyRevenue]


class YearlyTotals(BaseModel):
    year: int
    currency: Optional[str] = None
    total_revenue: str
    total_expenses: str
    net: str
