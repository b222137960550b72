import io
import logging
import time
from typing import List

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError
from supabase import AsyncClient

from marketplace.config import STORAGE_BUCKET

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def detect_content_type(content: bytes, declared: str | None = None) -> str:
    """
    Content type for an uploaded file:
    - recognisable image bytes → the image format's MIME type (via Pillow)
    - otherwise the type the browser declared
    - otherwise application/octet-stream

    The storage API would default to text/plain, which breaks <img> rendering.
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            mime = Image.MIME.get(img.format or "")
    except UnidentifiedImageError:
        mime = None
    return mime or declared or "application/octet-stream"


def file_extension(filename: str | None) -> str:
    """Text after the last dot of the original filename (the whole name if it has no dot)"""
    return filename.split(".")[-1] if filename else ""


def epoch_millis() -> int:
    return int(time.time() * 1000)


def listing_image_key(listing_id, user_id: str, index: int, filename: str | None) -> str:
    """Generate key: listings/{listing_id}/{user_id}-{millis}-{index}.{ext}"""
    return f"listings/{listing_id}/{user_id}-{epoch_millis()}-{index}.{file_extension(filename)}"


def avatar_key(user_id: str, filename: str | None) -> str:
    """Generate key: avatars/{user_id}-{millis}.{ext}"""
    return f"avatars/{user_id}-{epoch_millis()}.{file_extension(filename)}"


async def upload_file(client: AsyncClient, key: str, upload: UploadFile) -> str:
    """
    Upload the file's bytes under the given key.

    Storage errors (supabase.StorageException) propagate to the caller, which
    decides how to compensate.
    """
    # Reset file pointer to beginning
    await upload.seek(0)
    content = await upload.read()

    content_type = detect_content_type(content, upload.content_type)
    await client.storage.from_(STORAGE_BUCKET).upload(
        path=key,
        file=content,
        file_options={"content-type": content_type},
    )
    logger.info(f"Successfully uploaded file: {key} ({content_type}, {len(content)} bytes)")
    return key


async def get_public_url(client: AsyncClient, key: str) -> str:
    return await client.storage.from_(STORAGE_BUCKET).get_public_url(key)


async def remove_files(client: AsyncClient, keys: List[str]) -> None:
    await client.storage.from_(STORAGE_BUCKET).remove(keys)
    logger.info(f"Removed {len(keys)} file(s) from storage: {keys}")
