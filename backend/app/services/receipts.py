"""Presigned receipt uploads to S3-compatible object storage."""

import logging
from uuid import uuid4

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from backend.app.core.settings import get_settings

logger = logging.getLogger(__name__)


class ReceiptStorageUnavailable(Exception):
    """Raised when object storage is not configured."""


class ReceiptStorageError(Exception):
    """Raised when an upload URL cannot be signed."""


def _receipt_key(owner_id: int, filename: str) -> str:
    _, dot, extension = filename.strip().rpartition(".")
    extension = extension.lower() if dot and extension else "bin"
    return f"receipts/{owner_id}/{uuid4()}.{extension}"


def _s3_client(settings):
    return boto3.client(
        "s3",
        endpoint_url=settings.r2_endpoint,
        aws_access_key_id=settings.r2_access_key_id,
        aws_secret_access_key=settings.r2_secret_access_key,
        region_name=settings.r2_region,
        config=Config(signature_version="s3v4"),
    )


def create_receipt_upload(owner_id: int, filename: str, content_type: str) -> dict:
    """Return a short-lived PUT URL and the public URL the receipt will have."""
    settings = get_settings()
    required = {
        "R2_ENDPOINT": settings.r2_endpoint,
        "R2_ACCESS_KEY_ID": settings.r2_access_key_id,
        "R2_SECRET_ACCESS_KEY": settings.r2_secret_access_key,
        "R2_BUCKET": settings.r2_bucket,
        "R2_PUBLIC_BASE_URL": settings.r2_public_base_url,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ReceiptStorageUnavailable(f"Missing storage settings: {', '.join(missing)}")

    key = _receipt_key(owner_id, filename)
    try:
        upload_url = _s3_client(settings).generate_presigned_url(
            "put_object",
            Params={"Bucket": settings.r2_bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=settings.receipt_upload_expiry_seconds,
        )
    except (BotoCoreError, ClientError) as exc:
        logger.exception("Failed to sign receipt upload for user %s", owner_id)
        raise ReceiptStorageError(str(exc)) from exc

    logger.info("Issued receipt upload URL for user %s (%s)", owner_id, key)
    return {
        "upload_url": upload_url,
        "receipt_url": f"{settings.r2_public_base_url.rstrip('/')}/{key}",
    }
