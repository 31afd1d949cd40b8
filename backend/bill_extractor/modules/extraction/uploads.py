import logging
import secrets
import time
from contextlib import contextmanager
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from bill_extractor.core.config import settings
from bill_extractor.modules.extraction.exceptions import UploadRejected

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class StoredUpload:
    path: Path
    original_name: str
    size: int


def validate_upload(content_type: str | None, size: int, max_bytes: int | None = None) -> None:
    limit = settings.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    if (content_type or "").split(";")[0].strip().lower() != PDF_CONTENT_TYPE:
        raise UploadRejected("Only PDF files are accepted")
    if size > limit:
        raise UploadRejected(f"File too large: limit is {limit // (1024 * 1024)} MiB")
    if size == 0:
        raise UploadRejected("Uploaded file is empty")


def _scratch_name(original_name: str) -> str:
    suffix = Path(original_name).suffix.lower() or ".pdf"
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"


def store_upload(
    data: bytes,
    original_name: str,
    content_type: str | None,
    upload_dir: Path | None = None,
    max_bytes: int | None = None,
) -> StoredUpload:
    validate_upload(content_type, len(data), max_bytes)

    directory = Path(upload_dir or settings.upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / _scratch_name(original_name)
    path.write_bytes(data)
    logger.info("Stored upload %s as %s (%d bytes)", original_name, path.name, len(data))
    return StoredUpload(path=path, original_name=original_name, size=len(data))


def discard_upload(path: Path) -> None:
    """Delete a scratch file; failures are logged, never raised."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Failed to delete scratch file %s: %s", path, exc)


@contextmanager
def scratch_file(upload: StoredUpload) -> Iterator[Path]:
    try:
        yield upload.path
    finally:
        discard_upload(upload.path)
