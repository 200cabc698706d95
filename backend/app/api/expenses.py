"""Expense tracking endpoints."""

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.expense import Expense
from backend.app.models.user import User
from backend.app.schemas.expense import (
    ExpenseCreate,
    ExpenseRead,
    ExpenseUpdate,
    ReceiptUploadRequest,
    ReceiptUploadResponse,
)
from backend.app.services.receipts import ReceiptStorageError, ReceiptStorageUnavailable, create_receipt_upload

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _validate_vendor(vendor: str) -> str:
    cleaned = vendor.strip()
    if not cleaned:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Vendor is required")
    return cleaned


def _validate_amount(amount: Decimal) -> Decimal:
    if amount <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Amount must be positive")
    return amount


def _get_owned_expense(db: Session, expense_id: int, owner_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id, Expense.owner_id == owner_id).first()
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


@router.get("", response_model=List[ExpenseRead])
async def list_expenses(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        db.query(Expense)
        .filter(Expense.owner_id == current_user.id)
        .order_by(Expense.date.desc(), Expense.id.desc())
        .all()
    )


@router.post("", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = Expense(
        owner_id=current_user.id,
        vendor=_validate_vendor(expense_in.vendor),
        description=expense_in.description,
        amount=_validate_amount(expense_in.amount),
        currency=expense_in.currency,
        date=expense_in.date,
        category=expense_in.category,
        receipt_url=expense_in.receipt_url,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


@router.patch("/{expense_id}", response_model=ExpenseRead)
async def update_expense(
    expense_id: int,
    expense_in: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = _get_owned_expense(db, expense_id, current_user.id)
    update_data = expense_in.model_dump(exclude_unset=True, exclude_none=True)
    if "vendor" in update_data:
        update_data["vendor"] = _validate_vendor(update_data["vendor"])
    if "amount" in update_data:
        update_data["amount"] = _validate_amount(update_data["amount"])
    for field, value in update_data.items():
        setattr(expense, field, value)
    db.commit()
    db.refresh(expense)
    return expense


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(expense_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    expense = _get_owned_expense(db, expense_id, current_user.id)
    db.delete(expense)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/receipt-url", response_model=ReceiptUploadResponse)
def create_receipt_upload_url(payload: ReceiptUploadRequest, current_user: User = Depends(get_current_user)):
    if not payload.filename.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename is required")
    if not payload.content_type.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content type is required")
    try:
        return create_receipt_upload(current_user.id, payload.filename, payload.content_type.strip())
    except ReceiptStorageUnavailable:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Receipt storage is not configured")
    except ReceiptStorageError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to create receipt upload URL")
