from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from bill_extractor.core.config import settings
from bill_extractor.modules.extraction import get_extraction_pipeline, get_upload_dir
from bill_extractor.modules.extraction.exceptions import UploadRejected
from bill_extractor.modules.extraction.pipeline import ExtractionPipeline
from bill_extractor.modules.extraction.schemas import (
    CompareResponse,
    ErrorResponse,
    ExtractResponse,
    IndexResponse,
)
from bill_extractor.modules.extraction.service import compare_models, extract_bill
from bill_extractor.modules.extraction.uploads import StoredUpload, store_upload

router = APIRouter(tags=["Extraction"], prefix="/api")

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Upload rejected or malformed form"},
    422: {"model": ErrorResponse, "description": "No usable data in the PDF or the reply"},
    500: {"model": ErrorResponse, "description": "Model invocation or parsing failed"},
}


async def _store(pdf: UploadFile | None, upload_dir: Path) -> StoredUpload:
    if pdf is None:
        raise UploadRejected("No PDF file provided")
    # one byte past the limit is enough to reject oversized uploads
    data = await pdf.read(settings.MAX_UPLOAD_BYTES + 1)
    return store_upload(
        data,
        original_name=pdf.filename or "upload.pdf",
        content_type=pdf.content_type,
        upload_dir=upload_dir,
    )


@router.get("/", response_model=IndexResponse)
async def index_endpoint():
    return IndexResponse(status="success", message="Welcome to the bill extractor API")


@router.post("/pdf", response_model=ExtractResponse, responses=_ERROR_RESPONSES)
async def extract_endpoint(
    pdf: UploadFile | None = File(None),
    model: str | None = Form(None),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
    upload_dir: Path = Depends(get_upload_dir),
):
    upload = await _store(pdf, upload_dir)
    return await run_in_threadpool(extract_bill, pipeline, upload, model or None)


@router.post("/pdf/compare", response_model=CompareResponse, responses=_ERROR_RESPONSES)
async def compare_endpoint(
    pdf: UploadFile | None = File(None),
    models: str | None = Form(None),
    pipeline: ExtractionPipeline = Depends(get_extraction_pipeline),
    upload_dir: Path = Depends(get_upload_dir),
):
    upload = await _store(pdf, upload_dir)
    model_list = [m.strip() for m in (models or "").split(",") if m.strip()]
    return await run_in_threadpool(compare_models, pipeline, upload, model_list or None)
