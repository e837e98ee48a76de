"""Upload validation shared by the event, profile and chat routers"""

import logging
from typing import Optional

from fastapi import HTTPException, UploadFile

from ..storage import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE, FilePayload, safe_filename

logger = logging.getLogger(__name__)


async def read_upload(
    file: UploadFile,
    allowed_types: Optional[list[str]] = ALLOWED_IMAGE_TYPES,
    max_size: int = MAX_IMAGE_SIZE,
) -> FilePayload:
    """
    Read an UploadFile into memory after checking name, type and size.

    ``allowed_types=None`` accepts any content type (chat attachments).
    """
    try:
        filename = safe_filename(file.filename)
    except ValueError as e:
        logger.warning(f"❌ Rejected upload filename '{file.filename}': {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e

    if allowed_types is not None and file.content_type not in allowed_types:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only PNG, JPEG, WebP, GIF, HEIC and AVIF images are allowed.",
        )

    contents = await file.read()
    if len(contents) > max_size:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds {max_size // (1024 * 1024)}MB limit. "
            f"Your file is {len(contents) / (1024 * 1024):.2f}MB.",
        )

    return FilePayload(filename=filename, content_type=file.content_type, data=contents)
