from bill_extractor.core.config import settings
from bill_extractor.modules.extraction.exceptions import NoUsableData
from bill_extractor.modules.extraction.pdf import extract_text_from_path
from bill_extractor.modules.extraction.pipeline import ExtractionPipeline
from bill_extractor.modules.extraction.schemas import CompareResponse, ExtractResponse
from bill_extractor.modules.extraction.uploads import StoredUpload, scratch_file


def extract_bill(
    pipeline: ExtractionPipeline,
    upload: StoredUpload,
    model: str | None = None,
) -> ExtractResponse:
    with scratch_file(upload) as path:
        text = extract_text_from_path(path)
        result = pipeline.extract(text, model)

    if not result.data:
        raise NoUsableData("Failed to extract data from the PDF")

    return ExtractResponse(
        status="success",
        data={**result.data, "Filename": upload.original_name},
        usage=result.usage,
        pricing=result.pricing,
    )


def compare_models(
    pipeline: ExtractionPipeline,
    upload: StoredUpload,
    models: list[str] | None = None,
) -> CompareResponse:
    models = models or settings.compare_models

    with scratch_file(upload) as path:
        text = extract_text_from_path(path)
        results = pipeline.compare(text, models)

    for result in results:
        if result.data is not None:
            result.data["Filename"] = upload.original_name

    return CompareResponse(
        status="success",
        filename=upload.original_name,
        results=results,
    )
