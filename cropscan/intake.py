"""UploadIntake — allow-list validation and temp-file handling for incoming images."""
import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional
from urllib.parse import urlparse

from cropscan.constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    ALLOWED_IMAGE_MIME_TYPES,
    IMAGE_MIME_PREFIX,
    MSG_ERR_DISALLOWED_TYPE,
    MSG_ERR_MISSING_URL,
    MSG_ERR_NO_FILE,
    MSG_INTAKE_CLEANUP_FAILED,
    MSG_INTAKE_REJECTED,
    UPLOAD_CHUNK_SIZE,
    URL_SCHEMES,
)
from cropscan.errors import ValidationError
from cropscan.models import ImageUrl, RawUpload, ValidatedImage

logger = logging.getLogger(__name__)


# ── pure helpers ──────────────────────────────────────────────────────────────


def extension_of(name: Optional[str]) -> str:
    return os.path.splitext(name)[1].lower() if name else ""


def is_allowed_extension(name: Optional[str]) -> bool:
    return extension_of(name) in ALLOWED_IMAGE_EXTENSIONS


def normalize_mime(content_type: Optional[str]) -> str:
    """'Image/PNG; charset=binary' → 'image/png'."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def is_allowed_mime(content_type: Optional[str]) -> bool:
    return normalize_mime(content_type) in ALLOWED_IMAGE_MIME_TYPES


def is_well_formed_url(value: str) -> bool:
    if value.startswith(f"data:{IMAGE_MIME_PREFIX}"):
        return ";base64," in value
    parsed = urlparse(value)
    return parsed.scheme in URL_SCHEMES and bool(parsed.netloc)


# ── temp storage ──────────────────────────────────────────────────────────────


def _remove(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.exception(MSG_INTAKE_CLEANUP_FAILED, path)


@contextmanager
def stored_upload(upload: RawUpload, upload_dir: Optional[str] = None) -> Iterator[str]:
    """Spool the upload to a temp file keeping its extension; the file is
    removed when the block exits, whatever the outcome."""
    handle = tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=extension_of(upload.filename),
        dir=upload_dir,
        delete=False,
    )
    path = handle.name
    try:
        with handle:
            shutil.copyfileobj(upload.stream, handle, UPLOAD_CHUNK_SIZE)
        yield path
    finally:
        _remove(path)


# ── intake ────────────────────────────────────────────────────────────────────


def _reject(upload: RawUpload, reason: str) -> ValidationError:
    logger.warning(MSG_INTAKE_REJECTED, reason, upload.filename, upload.content_type)
    return ValidationError(reason)


def intake_upload(
    upload: Optional[RawUpload], upload_dir: Optional[str] = None
) -> ValidatedImage:
    """Validate a raw upload and load it into memory.

    Both the declared MIME type and the original filename extension must pass
    the allow-list. The stored copy's extension is checked again before its
    bytes are read. No temp file outlives this call.
    """
    if upload is None:
        raise ValidationError(MSG_ERR_NO_FILE)

    match (is_allowed_mime(upload.content_type), is_allowed_extension(upload.filename)):
        case (True, True):
            pass
        case _:
            raise _reject(upload, MSG_ERR_DISALLOWED_TYPE)

    with stored_upload(upload, upload_dir) as path:
        if not is_allowed_extension(path):
            raise _reject(upload, MSG_ERR_DISALLOWED_TYPE)
        with open(path, "rb") as fh:
            data = fh.read()

    return ValidatedImage(data=data, mime_type=normalize_mime(upload.content_type))


def intake_url(image_url: object) -> ImageUrl:
    """Accept an externally hosted image reference. The bytes are never fetched."""
    match image_url:
        case str() as url if url.strip() and is_well_formed_url(url.strip()):
            return ImageUrl(url=url.strip())
        case _:
            raise ValidationError(MSG_ERR_MISSING_URL)
