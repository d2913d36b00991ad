"""API endpoint definitions."""

import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from leaf_gate.core.config import (
    ALLOWED_CONTENT_TYPES,
    MAX_FILE_SIZE,
    ValidationConfig,
)
from leaf_gate.core.exceptions import (
    EmptyImageError,
    ImageTooLargeError,
    LeafGateError,
    UnsupportedMediaError,
)
from leaf_gate.processing.decision import REASON_MESSAGES
from leaf_gate.processing.pipeline import LeafValidationPipeline
from .schemas import (
    ErrorDetail,
    ErrorResponse,
    ImageMetrics,
    ReasonCode,
    ValidationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_upload(file: UploadFile) -> bytes:
    """Check the upload's content type and size and return its bytes."""
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedMediaError(f"Unsupported format: {file.content_type}")

    chunks = []
    total_size = 0

    while chunk := await file.read(1024 * 1024):  # 1MB chunks
        total_size += len(chunk)
        if total_size > MAX_FILE_SIZE:
            raise ImageTooLargeError(f"File exceeds {MAX_FILE_SIZE // (1024*1024)}MB limit")
        chunks.append(chunk)

    if total_size == 0:
        raise EmptyImageError()

    return b"".join(chunks)


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "leaf-gate"}


@router.post(
    "/validate",
    response_model=ValidationResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 415: {"model": ErrorResponse}},
)
async def validate_leaf(
    image: UploadFile = File(..., description="Photo that should show a single plant leaf"),
    locale: str = Form(default="id", description="Language of the rejection reason"),
):
    """
    Check whether an uploaded photo plausibly shows a single plant leaf.

    A rejection is a normal response with ``valid=false`` and a reason.
    """
    if locale not in REASON_MESSAGES:
        raise HTTPException(
            status_code=422,
            detail=ErrorDetail(
                code="UNSUPPORTED_LOCALE",
                message=f"Unsupported locale: {locale}",
                details={"supported": sorted(REASON_MESSAGES)},
            ).model_dump(),
        )

    try:
        image_bytes = await read_upload(image)
    except LeafGateError as e:
        error_detail = ErrorDetail(
            code=e.code,
            message=e.message,
            details=e.details,
            suggestions=getattr(e, "suggestions", []),
        )
        raise HTTPException(status_code=e.status_code, detail=error_detail.model_dump())

    pipeline = LeafValidationPipeline(ValidationConfig(locale=locale))
    # CPU-bound; keep it off the event loop
    report = await run_in_threadpool(pipeline.analyze, image_bytes)
    verdict = report.verdict

    logger.info(
        "Validated %s: valid=%s code=%s",
        image.filename,
        verdict.valid,
        None if verdict.code is None else verdict.code.value,
    )

    return ValidationResponse(
        valid=verdict.valid,
        reason=verdict.reason,
        code=None if verdict.code is None else ReasonCode(verdict.code.value),
        processing_time_ms=report.processing_time_ms,
        metrics=ImageMetrics(**report.metrics),
    )
