"""Signed upload handles for the gallery object store."""
from datetime import datetime, timedelta
import logging
from pathlib import PurePosixPath
import secrets
import time

from jose import JWTError, jwt

from schoolsite.config import get_settings
from schoolsite.database import utcnow
from schoolsite.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)
settings = get_settings()

UPLOAD_TOKEN_TYPE = "upload"


def build_object_path(file_name: str) -> str:
    """Unique object name that keeps only the extension of the client's file name."""
    suffix = PurePosixPath(file_name).suffix.lower()
    if not suffix or len(suffix) > 10:
        raise ValidationError("File name must have an extension")
    millis = int(time.time() * 1000)
    return f"{millis}-{secrets.token_hex(6)}{suffix}"


def public_url(path: str) -> str:
    return f"{settings.storage_base_url}/object/public/{settings.storage_bucket}/{path}"


def create_upload_token(path: str, admin_id: str, now: datetime | None = None) -> tuple[str, datetime]:
    """Sign a short-lived token allowing one upload to ``path``."""
    now = now or utcnow()
    expires_at = now + timedelta(seconds=settings.upload_url_expire_seconds)
    claims = {
        "sub": path,
        "bucket": settings.storage_bucket,
        "admin": admin_id,
        "type": UPLOAD_TOKEN_TYPE,
        "iat": now,
        "exp": expires_at,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.upload_algorithm), expires_at


def create_signed_upload(file_name: str | None, content_type: str | None, admin_id: str) -> dict:
    """Issue an upload handle: signed URL, token, object path and eventual public URL."""
    if not file_name:
        raise ValidationError("File name is required")
    if content_type and not content_type.startswith("image/"):
        raise ValidationError("Only image uploads are allowed")

    path = build_object_path(file_name)
    token, expires_at = create_upload_token(path, admin_id)
    logger.info(f"Issued upload handle for {path} (expires {expires_at.isoformat()})")

    return {
        "signedUrl": f"{settings.storage_base_url}/object/upload/sign/{settings.storage_bucket}/{path}?token={token}",
        "token": token,
        "path": path,
        "publicUrl": public_url(path),
    }


def verify_upload_token(token: str, path: str) -> dict:
    """Check an upload token against the object path it is presented for."""
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.upload_algorithm])
    except JWTError:
        raise AuthenticationError("Invalid or expired upload token")

    if (
        claims.get("type") != UPLOAD_TOKEN_TYPE
        or claims.get("sub") != path
        or claims.get("bucket") != settings.storage_bucket
    ):
        raise AuthenticationError("Invalid or expired upload token")
    return claims
