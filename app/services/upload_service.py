# app/services/upload_service.py
import logging
import uuid

from app.core import storage_utils
from app.core.exceptions import PayloadTooLargeError, ValidationError
from app.schemas.post import MediaType

logger = logging.getLogger(__name__)

MAX_MEDIA_BYTES = 100 * 1024 * 1024  # 100MB per file

# content type -> stored file extension
ALLOWED_CONTENT_TYPES: dict[MediaType, dict[str, str]] = {
    "image": {
        "image/jpeg": "jpg",
        "image/png": "png",
        "image/gif": "gif",
        "image/webp": "webp",
        "image/tiff": "tiff",
        "image/bmp": "bmp",
    },
    "video": {
        "video/mp4": "mp4",
        "video/quicktime": "mov",
        "video/x-msvideo": "avi",
        "video/x-ms-wmv": "wmv",
        "video/webm": "webm",
        "video/3gpp": "3gp",
    },
    "audio": {
        "audio/mpeg": "mp3",
        "audio/wav": "wav",
        "audio/aac": "aac",
        "audio/ogg": "ogg",
        "audio/webm": "webm",
        "audio/flac": "flac",
    },
}

# Browsers often send application/octet-stream; fall back to the extension.
EXTENSION_TYPES: dict[str, tuple[MediaType, str]] = {
    "jpg": ("image", "image/jpeg"),
    "jpeg": ("image", "image/jpeg"),
    "png": ("image", "image/png"),
    "gif": ("image", "image/gif"),
    "webp": ("image", "image/webp"),
    "tiff": ("image", "image/tiff"),
    "bmp": ("image", "image/bmp"),
    "mp4": ("video", "video/mp4"),
    "mov": ("video", "video/quicktime"),
    "avi": ("video", "video/x-msvideo"),
    "wmv": ("video", "video/x-ms-wmv"),
    "3gp": ("video", "video/3gpp"),
    "mp3": ("audio", "audio/mpeg"),
    "wav": ("audio", "audio/wav"),
    "aac": ("audio", "audio/aac"),
    "ogg": ("audio", "audio/ogg"),
    "flac": ("audio", "audio/flac"),
}


def detect_media_type(content_type: str | None, filename: str | None) -> tuple[MediaType, str, str]:
    """
    Work out (media type, canonical content type, extension).

    Raises:
        ValidationError: unsupported file.
    """
    ctype = (content_type or "").split(";", 1)[0].strip().lower()
    for media_type, types in ALLOWED_CONTENT_TYPES.items():
        if ctype in types:
            return media_type, ctype, types[ctype]

    name = filename or ""
    ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if ext in EXTENSION_TYPES:
        media_type, ctype = EXTENSION_TYPES[ext]
        return media_type, ctype, ALLOWED_CONTENT_TYPES[media_type][ctype]

    raise ValidationError(f"Unsupported file format: {name or ctype or 'unknown'}")


class UploadService:
    """
    Media uploads for greetings.

    Files land in storage first; the returned URLs are then attached to a
    post by the client (upload-then-submit).
    """

    def __init__(self, max_bytes: int = MAX_MEDIA_BYTES):
        self.max_bytes = max_bytes

    def upload_media(
        self,
        user_id: uuid.UUID,
        filename: str | None,
        content_type: str | None,
        file_bytes: bytes,
    ) -> dict[str, str]:
        """
        Validate and store one file.

        Path pattern:
            greetings/user_<user_id>/<uuid>.<ext>

        Returns:
            {"url": <public url>, "type": "image" | "video" | "audio"}
        """
        if len(file_bytes) > self.max_bytes:
            raise PayloadTooLargeError(
                f"File {filename} is too large. Maximum size is "
                f"{self.max_bytes // (1024 * 1024)}MB."
            )
        if not file_bytes:
            raise ValidationError("File is empty")

        media_type, ctype, ext = detect_media_type(content_type, filename)
        path = f"greetings/user_{user_id}/{storage_utils.generate_filename(ext)}"
        url = storage_utils.upload_to_storage(path, file_bytes, ctype)
        logger.info("User %s uploaded %s (%d bytes)", user_id, media_type, len(file_bytes))
        return {"url": url, "type": media_type}
