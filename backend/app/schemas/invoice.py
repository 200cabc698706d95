"""Invoice schemas."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from backend.app.schemas.line_item import LineItemCreate, LineItemRead


def normalize_currency(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    code = value.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError("Currency must be a three-letter code")
    return code


class InvoiceCreate(BaseModel):
    company_id: Optional[int] = None
    template_id: Optional[int] = None
    client_name: Optional[str] = None
    client_address: Optional[str] = None
    currency: str = "EUR"
    date: date_type
    items: List[LineItemCreate]

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value):
        return normalize_currency(value)


class InvoiceUpdate(BaseModel):
    company_id: Optional[int] = None
    template_id: Optional[int] = None
    client_name: Optional[str] = None
    client_address: Optional[str] = None
    currency: Optional[str] = None
    date: Optional[date_type] = None
    items: Optional[List[LineItemCreate]] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value):
        return normalize_currency(value)


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    invoice_number: str
    company_id: Optional[int]
    template_id: Optional[int]

    client_name: str
    client_address: str
    user_address: str
    currency: str
    date: date_type
    total_amount: Decimal
    items: List[LineItemRead]

    created_at: datetime
    updated_at: datetime
