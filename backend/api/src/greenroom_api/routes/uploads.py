"""Photo upload relay endpoint."""

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from greenroom.config import get_settings
from greenroom.models.errors import ErrorCode, ErrorResponse, UploadError
from greenroom.models.uploads import UploadResult
from greenroom.services.media_upload import MediaUploadService
from greenroom_api.dependencies import get_media_upload_service

router = APIRouter(tags=["uploads"])


@router.post(
    "/upload",
    summary="Upload an ID-matching photo",
    description="""
Accepts one image as multipart field `file` (10MB max by default), stores it
and returns its public URL for the membership and social entry forms.
""",
    response_model=UploadResult,
    responses={
        400: {"description": "Missing file, not an image or too large", "model": ErrorResponse},
        500: {"description": "Image store failure", "model": ErrorResponse},
    },
)
async def upload_photo(
    file: UploadFile | None = File(default=None),
    uploads: MediaUploadService = Depends(get_media_upload_service),
) -> UploadResult:
    if file is None:
        raise UploadError(ErrorCode.UPLOAD_MISSING_FILE)

    # Bounded read: limit + 1 bytes
    data = await file.read(get_settings().upload_max_bytes + 1)
    return await run_in_threadpool(uploads.upload, file.filename, file.content_type, data)
