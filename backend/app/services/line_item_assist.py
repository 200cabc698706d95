"""Line item description helpers: recall the last one, suggest a better one."""

import logging
from typing import Optional

import requests
from sqlalchemy.orm import Session

from backend.app.core.settings import get_settings
from backend.app.models.invoice import Invoice
from backend.app.models.line_item import LineItem

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You improve a single invoice line-item description. Keep it concise, professional, "
    "and specific. Return only the improved description without quotes."
)


class SuggestionUnavailable(Exception):
    """Raised when no suggestion backend is configured."""


class SuggestionFailed(Exception):
    """Raised when the suggestion backend errors or returns nothing usable."""


def last_line_item_description(db: Session, owner_id: int) -> Optional[str]:
    """Description of the newest line on the user's most recent invoice."""
    latest_invoice = (
        db.query(Invoice)
        .filter(Invoice.owner_id == owner_id)
        .order_by(Invoice.date.desc(), Invoice.id.desc())
        .first()
    )
    if latest_invoice is None:
        return None
    latest_item = (
        db.query(LineItem)
        .filter(LineItem.invoice_id == latest_invoice.id)
        .order_by(LineItem.id.desc())
        .first()
    )
    return latest_item.description if latest_item is not None else None


def _build_prompt(description: str, last_description: Optional[str]) -> str:
    context = f"Previous line-item description: {last_description}" if last_description else ""
    return f"Current line-item description: {description}\n{context}\nImprove the current description."


def improve_line_item(description: str, last_description: Optional[str] = None) -> str:
    settings = get_settings()
    if not settings.openai_api_key:
        raise SuggestionUnavailable("OPENAI_API_KEY is not set")

    payload = {
        "model": settings.openai_model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": _build_prompt(description, last_description)},
        ],
        "temperature": 0.3,
    }
    try:
        response = requests.post(
            f"{settings.openai_base_url}/chat/completions",
            json=payload,
            headers={"Authorization": f"Bearer {settings.openai_api_key}"},
            timeout=settings.llm_timeout_seconds,
        )
        response.raise_for_status()
        body = response.json()
    except (requests.exceptions.RequestException, ValueError) as exc:
        logger.warning("Line item suggestion request failed: %s", exc)
        raise SuggestionFailed(str(exc)) from exc

    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise SuggestionFailed("Unexpected completion payload") from exc
    suggestion = (content or "").strip()
    return suggestion or description
