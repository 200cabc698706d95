"""User profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.user import UserProfileUpdate, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.patch("/profile", response_model=UserRead)
async def update_my_profile(
    profile: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Existing invoices keep the address they were created with.
    if profile.address is not None:
        current_user.address = profile.address.strip() or None
    db.commit()
    db.refresh(current_user)
    return current_user
