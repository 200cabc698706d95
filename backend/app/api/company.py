"""Company profile endpoints.

Each user owns at most one company. The full company list is readable by
any signed-in user so companies can be picked as invoice clients.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.company import Company
from backend.app.models.user import User
from backend.app.schemas.company import CompanyCreate, CompanyRead, CompanyUpdate

router = APIRouter(prefix="/company", tags=["company"])


def _require_text(value: str, detail: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    return cleaned


def _ensure_registration_number_free(db: Session, registration_number: str, exclude_id: int | None = None) -> None:
    query = db.query(Company).filter(Company.registration_number == registration_number)
    if exclude_id is not None:
        query = query.filter(Company.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Registration number already exists")


def _get_own_company(db: Session, owner_id: int) -> Company:
    company = db.query(Company).filter(Company.owner_id == owner_id).first()
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return company


@router.post("", response_model=CompanyRead)
async def create_company(
    company_in: CompanyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    name = _require_text(company_in.name, "Name and address are required")
    address = _require_text(company_in.address, "Name and address are required")
    registration_number = _require_text(company_in.registration_number, "Registration number is required")

    if db.query(Company).filter(Company.owner_id == current_user.id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Company already exists")
    _ensure_registration_number_free(db, registration_number)

    company = Company(
        owner_id=current_user.id,
        name=name,
        address=address,
        registration_number=registration_number,
    )
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


@router.get("", response_model=List[CompanyRead])
async def list_companies(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(Company).order_by(Company.name.asc(), Company.id.asc()).all()


@router.get("/me", response_model=CompanyRead)
async def get_my_company(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_own_company(db, current_user.id)


@router.patch("", response_model=CompanyRead)
async def update_company(
    company_in: CompanyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    company = _get_own_company(db, current_user.id)
    if company_in.name is not None:
        company.name = _require_text(company_in.name, "Name is required")
    if company_in.address is not None:
        company.address = _require_text(company_in.address, "Address is required")
    if company_in.registration_number is not None:
        registration_number = _require_text(company_in.registration_number, "Registration number is required")
        _ensure_registration_number_free(db, registration_number, exclude_id=company.id)
        company.registration_number = registration_number
    db.commit()
    db.refresh(company)
    return company
