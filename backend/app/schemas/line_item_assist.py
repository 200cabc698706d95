from typing import Optional

from pydantic import BaseModel


class ImproveLineItemRequest(BaseModel):
    description: str


class ImproveLineItemResponse(BaseModel):
    suggestion: str
    based_on: Optional[str] = None


class LastLineItemResponse(BaseModel):
    description: Optional[str] = None
