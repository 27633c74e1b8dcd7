"""
File Upload Utility - Store resume files submitted with applications.

Supported formats:
- PDF (.pdf)
- Word (.doc, .docx)

Files are written to settings.upload_dir and served from /uploads.
"""

import os
import uuid
from fastapi import UploadFile, HTTPException

from app.core.config import get_settings

ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx'}
UPLOAD_URL_PREFIX = "/uploads"


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def save_resume(file: UploadFile) -> str:
    """
    Validate and store an uploaded resume.

    Returns:
        Public URL path of the stored file, e.g. /uploads/resume-<uuid>.pdf

    Raises:
        HTTPException on validation errors
    """
    settings = get_settings()
    max_bytes = settings.max_upload_mb * 1024 * 1024

    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOC, DOCX"
        )

    content = await file.read()

    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_upload_mb}MB"
        )
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    os.makedirs(settings.upload_dir, exist_ok=True)
    stored_name = f"resume-{uuid.uuid4().hex}{ext}"
    with open(os.path.join(settings.upload_dir, stored_name), "wb") as out:
        out.write(content)

    return f"{UPLOAD_URL_PREFIX}/{stored_name}"
