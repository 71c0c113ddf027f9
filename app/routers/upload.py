# app/routers/upload.py
from fastapi import APIRouter, Depends, File, UploadFile, status

from app.core.auth import require_confirmed
from app.dependencies import get_upload_service
from app.models.user import User
from app.schemas.post import MediaItem
from app.services.upload_service import UploadService

router = APIRouter(prefix="/upload", tags=["Upload"])


@router.post(
    "",
    response_model=MediaItem,
    status_code=status.HTTP_201_CREATED,
    summary="Upload one image, video or audio file for a greeting",
)
def upload_media(
    file: UploadFile = File(...),
    current_user: User = Depends(require_confirmed),
    uploads: UploadService = Depends(get_upload_service),
):
    """
    Store one media file and return its public URL and media type.

    - Images: JPEG, PNG, GIF, WEBP, TIFF, BMP
    - Video: MP4, MOV, AVI, WMV, WEBM, 3GP
    - Audio: MP3, WAV, AAC, OGG, WEBM, FLAC
    - Max 100MB per file.

    Attach the returned item to `media` when creating the post.
    """
    file_bytes = file.file.read()
    return uploads.upload_media(
        user_id=current_user.id,
        filename=file.filename,
        content_type=file.content_type,
        file_bytes=file_bytes,
    )
