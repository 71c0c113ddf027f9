# app/core/storage_utils.py
import uuid

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin


def _bucket():
    return supabase_admin().storage.from_(get_settings().STORAGE_BUCKET)


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    Args:
        path: Full object path inside the bucket.
              Example: "greetings/user_<uuid>/<uuid>.mp4"
        file_bytes: File content in bytes.
        content_type: MIME type stored with the object.

    Raises:
        Any exception raised by the Supabase client if upload fails.
    """
    bucket = _bucket()
    bucket.upload(path, file_bytes, {"content-type": content_type, "upsert": "true"})
    return bucket.get_public_url(path)


def generate_filename(ext: str) -> str:
    """
    Random filename using UUID4, e.g. "<uuid4>.png".

    Args:
        ext: File extension without dot.
    """
    return f"{uuid.uuid4()}.{ext}"
