import io
import logging
from pathlib import Path

from pypdf import PdfReader

from bill_extractor.modules.extraction.exceptions import ExtractionError

logger = logging.getLogger(__name__)


def extract_text(pdf_bytes: bytes) -> str:
    """Concatenate the text of every page, in order."""
    if not pdf_bytes:
        raise ExtractionError("Uploaded PDF is empty")

    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as exc:
        # pypdf surfaces corrupt structure as arbitrary exception types
        raise ExtractionError(f"Failed to read PDF: {exc}") from exc

    text = "\n".join(pages).strip()
    if not text:
        logger.warning("PDF with %d page(s) produced no extractable text", len(pages))
    return text


def extract_text_from_path(path: Path) -> str:
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ExtractionError(f"Failed to read uploaded file: {exc}") from exc
    return extract_text(data)
