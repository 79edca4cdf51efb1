from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from paper_sections.api.models import LlmRequest, LlmResponse, ProcessResponse
from paper_sections.config.settings import settings
from paper_sections.llm import LlmClientError
from paper_sections.processing import ProcessingError, ProcessingService

logger = logging.getLogger("paper_sections.web")
logging.basicConfig(level=settings.LOG_LEVEL)


app = FastAPI(
    title="Paper Sections API",
    description=(
        "Upload a scholarly PDF, extract its sections through GROBID, and "
        "ask an LLM about selected sections."
    ),
    version="0.1.0",
)

# -------------------------------------------------------------------
# CORS
# -------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log method, path, and response status.
    """
    logger.info(f"Incoming request: {request.method} {request.url.path}")
    start = time.time()

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    logger.info(
        f"Completed {request.method} {request.url.path} "
        f"with status {response.status_code} in {duration_ms:.2f}ms"
    )

    return response


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------


def _get_service(app_obj: FastAPI) -> ProcessingService:
    """
    Fetch the processing service from app.state, building it if needed.
    """
    service = getattr(app_obj.state, "service", None)
    if service is None:
        service = ProcessingService()
        app_obj.state.service = service
    return service


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------


@app.get("/health", summary="Health check")
async def health(request: Request, check_grobid: bool = False) -> Dict[str, Any]:
    """
    Simple health check endpoint. With ?check_grobid=true the GROBID
    server's liveness is reported too.
    """
    payload: Dict[str, Any] = {"status": "ok"}
    if check_grobid:
        service = _get_service(request.app)
        payload["grobid"] = await run_in_threadpool(service.grobid_client.healthcheck)
    return payload


@app.post(
    "/processing",
    response_model=ProcessResponse,
    summary="Upload a PDF and extract its sections",
)
async def process_pdf(
    request: Request,
    file: Optional[UploadFile] = File(None, description="PDF file to process"),
) -> ProcessResponse:
    """
    Run an uploaded PDF through GROBID and return the extracted sections.

    - 400 if no file is uploaded or it is not a PDF.
    - 413 if it is larger than MAX_UPLOAD_BYTES.
    - 502 if GROBID or the extraction fails.
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if file.content_type != "application/pdf":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only PDF is allowed.",
        )

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.MAX_UPLOAD_BYTES} byte limit.",
        )

    service = _get_service(request.app)
    try:
        return await run_in_threadpool(
            service.process_document,
            content,
            file.filename or "document.pdf",
        )
    except ProcessingError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@app.post(
    "/processing/llm",
    response_model=LlmResponse,
    summary="Ask the LLM a question about selected sections",
)
async def process_with_llm(payload: LlmRequest, request: Request) -> LlmResponse:
    service = _get_service(request.app)
    try:
        return await run_in_threadpool(service.process_with_llm, payload)
    except LlmClientError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
