"""Expense schemas."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from backend.app.schemas.invoice import normalize_currency


class ExpenseCreate(BaseModel):
    vendor: str
    description: str = ""
    amount: Decimal
    currency: str = "EUR"
    date: date_type
    category: Optional[str] = None
    receipt_url: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value):
        return normalize_currency(value)


class ExpenseUpdate(BaseModel):
    vendor: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    date: Optional[date_type] = None
    category: Optional[str] = None
    receipt_url: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value):
        return normalize_currency(value)


class ExpenseRead(BaseModel):
    id: int
    owner_id: int
    vendor: str
    description: str
    amount: Decimal
    currency: str
    date: date_type
    category: Optional[str] = None
    receipt_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReceiptUploadRequest(BaseModel):
    filename: str
    content_type: str


class ReceiptUploadResponse(BaseModel):
    upload_url: str
    receipt_url: str
