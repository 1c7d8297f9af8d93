"""Photo upload endpoint.

Clients upload the record photo first and submit the returned URL as
``photoUrl``.
"""

from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from ..config import get_settings
from ..logging import get_context_logger, log_security_event
from ..storage import detect_image_type, store_photo
from . import PayloadTooLargeError, ValidationError
from .auth import CurrentUser
from .deps import PhotoStorage

router = APIRouter(prefix="/uploads", tags=["uploads"])

logger = get_context_logger(__name__)


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    content_type: str
    size: int


@router.post("/photo", response_model=UploadResponse, status_code=201)
async def upload_photo(
    user: CurrentUser,
    storage: PhotoStorage,
    file: UploadFile = File(...),
) -> UploadResponse:
    """Store a JPEG, PNG, GIF or WEBP photo and return its public URL."""
    max_bytes = get_settings().max_upload_bytes
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise PayloadTooLargeError(max_bytes)
    if not data:
        raise ValidationError("Uploaded file is empty")

    content_type = detect_image_type(data)
    if content_type is None:
        log_security_event(
            "upload_rejected",
            user.id,
            {"filename": file.filename, "declared_type": file.content_type},
        )
        raise ValidationError("Only JPEG, PNG, GIF and WEBP images are accepted")

    url = await run_in_threadpool(store_photo, storage, user.id, data, content_type)
    logger.info(
        "Photo uploaded",
        extra={"user_id": user.id, "content_type": content_type, "size": len(data)},
    )
    return UploadResponse(url=url, content_type=content_type, size=len(data))
