"""Line item description helpers for the invoice form."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.line_item_assist import (
    ImproveLineItemRequest,
    ImproveLineItemResponse,
    LastLineItemResponse,
)
from backend.app.services.line_item_assist import (
    SuggestionFailed,
    SuggestionUnavailable,
    improve_line_item,
    last_line_item_description,
)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/line-item-last", response_model=LastLineItemResponse)
def read_last_line_item(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"description": last_line_item_description(db, current_user.id)}


@router.post("/line-item-improve", response_model=ImproveLineItemResponse)
def suggest_line_item(
    payload: ImproveLineItemRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    description = payload.description.strip()
    if not description:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Description is required")
    last_description = last_line_item_description(db, current_user.id)
    try:
        suggestion = improve_line_item(description, last_description)
    except SuggestionUnavailable:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Line item suggestions are not configured")
    except SuggestionFailed:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Line item suggestion failed")
    return {"suggestion": suggestion, "based_on": last_description}
