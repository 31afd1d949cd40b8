import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bill_extractor.core.config import settings
from bill_extractor.core.logging import setup_logging
from bill_extractor.middleware.access_log import setup_access_log
from bill_extractor.middleware.cors import setup_cors
from bill_extractor.modules.extraction.exceptions import BillExtractorError
from bill_extractor.modules.extraction.router import router as extraction_router
from bill_extractor.modules.pricing.router import router as pricing_router

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set; OpenAI models will fail")
    yield


app = FastAPI(title="Bill Extractor API", lifespan=lifespan)

setup_cors(app)
setup_access_log(app)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


@app.exception_handler(BillExtractorError)
async def bill_extractor_error_handler(_request: Request, exc: BillExtractorError):
    if exc.status_code >= 500:
        logger.error("Pipeline error: %s", exc.message)
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return _error(400, f"Invalid request: {details}")


@app.exception_handler(Exception)
async def unhandled_error_handler(_request: Request, exc: Exception):
    logger.exception("Unhandled error")
    return _error(500, str(exc) or "Failed to process PDF")


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


app.include_router(extraction_router)
app.include_router(pricing_router)
