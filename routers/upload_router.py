import os
import re
import time

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.orm import Session

from core.auth import require_session
from core.config import Settings, get_app_settings
from core.database import get_db
from core.errors import AppError, ErrorKind, error_response
from core.logger import setup_logger
from crud.asset_crud import create_asset
from schemas.asset_schema import AssetCreate, UploadResponse
from schemas.session_schema import SessionRecord

logger = setup_logger(__name__)

router = APIRouter(tags=["Upload"])

CHUNK_SIZE = 1024 * 1024
# Filesystem name limit, also the width of assets.filename
MAX_FILENAME_BYTES = 255
# Room for multipart boundaries and part headers around the image
MULTIPART_OVERHEAD_BYTES = 64 * 1024
UPLOAD_PATH = "/upload-image"


def _normalize_filename(original_name: str) -> str:
    """Normalize a client-supplied filename.
    - Drop any directory components
    - Replace runs of whitespace with underscores
    """
    name = os.path.basename((original_name or "").replace("\\", "/")).strip()
    name = re.sub(r"\s+", "_", name)
    return name or "file"


def _truncate_utf8(value: str, max_bytes: int) -> str:
    return value.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")


def build_storage_name(original_name: str) -> str:
    """Prefix the normalized name with a nanosecond timestamp to avoid collisions.

    The stem is shortened so the whole name fits in MAX_FILENAME_BYTES; the
    extension is kept.
    """
    prefix = f"{time.time_ns()}-"
    stem, ext = os.path.splitext(_normalize_filename(original_name))
    budget = MAX_FILENAME_BYTES - len(prefix)
    ext = _truncate_utf8(ext, budget // 2)
    stem = _truncate_utf8(stem, budget - len(ext.encode("utf-8"))) or "file"
    return f"{prefix}{stem}{ext}"


def _is_image(content_type: str | None) -> bool:
    return bool(content_type) and content_type.lower().startswith("image/")


async def reject_oversized_upload(request: Request, call_next):
    """Refuse uploads whose Content-Length already exceeds the limit, before the body is read."""
    if request.method == "POST" and request.url.path == UPLOAD_PATH:
        settings: Settings = request.app.state.settings
        try:
            declared = int(request.headers.get("content-length", "0"))
        except ValueError:
            declared = 0
        if declared > settings.MAX_UPLOAD_BYTES + MULTIPART_OVERHEAD_BYTES:
            logger.info(f"Rejected upload declaring {declared} bytes")
            return error_response(ErrorKind.PAYLOAD_TOO_LARGE.status_code, "File too large")
    return await call_next(request)


@router.post(UPLOAD_PATH, response_model=UploadResponse)
def upload_image(
    image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    session: SessionRecord = Depends(require_session),
    settings: Settings = Depends(get_app_settings),
):
    if image is None:
        raise AppError(ErrorKind.INVALID_INPUT, "No file uploaded")
    if not _is_image(image.content_type):
        logger.info(f"Rejected upload of {image.content_type!r} from user {session.user_id}")
        raise AppError(ErrorKind.INVALID_INPUT, "Only image uploads allowed")

    max_bytes = settings.MAX_UPLOAD_BYTES
    if image.size is not None and image.size > max_bytes:
        raise AppError(ErrorKind.PAYLOAD_TOO_LARGE, "File too large")

    os.makedirs(settings.MEDIA_DIR, exist_ok=True)
    filename = build_storage_name(image.filename)
    file_path = os.path.join(settings.MEDIA_DIR, filename)

    # Stream to disk; the declared size is not trusted
    size_bytes = 0
    too_large = False
    with open(file_path, "wb") as out:
        while True:
            chunk = image.file.read(CHUNK_SIZE)
            if not chunk:
                break
            size_bytes += len(chunk)
            if size_bytes > max_bytes:
                too_large = True
                break
            out.write(chunk)
    if too_large:
        os.remove(file_path)
        raise AppError(ErrorKind.PAYLOAD_TOO_LARGE, "File too large")

    # File and row are written independently; the file stays if the insert fails
    create_asset(
        db,
        AssetCreate(
            user_id=session.user_id,
            filename=filename,
            original_name=image.filename or filename,
            mime_type=image.content_type,
            size_bytes=size_bytes,
            storage_path=file_path,
        ),
    )
    logger.info(f"Stored upload {filename} ({size_bytes} bytes) for user {session.user_id}")

    return UploadResponse(url=f"{settings.MEDIA_URL_PATH.rstrip('/')}/{filename}")
