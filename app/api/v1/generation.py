import asyncio
import logging
import time
from collections.abc import Awaitable
from typing import Any, TypeVar

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from app.ai.types import CompletionClient
from app.api.deps import get_generation_client, get_pdf_extractor, get_record_store
from app.api.errors import ToolRequestError
from app.core.config import settings
from app.core.rate_limit import tool_rate_limit
from app.core.record_store import RecordStore, RecordStoreError
from app.parsing.pdf_text import PdfTextExtractor, extract_or_placeholder
from app.schemas.generation import (
    CodeGenerationRequest,
    CodeGenerationResponse,
    EmailRequest,
    EmailResponse,
    ErrorResponse,
    PdfSummaryResponse,
    RecordKind,
    RecordListResponse,
    RecordModel,
    RecordResponse,
    ResumeRequest,
    ResumeResponse,
    TextCorrectionRequest,
    TextCorrectionResponse,
)
from app.services.generation_service import (
    correct_arabic_text,
    generate_code,
    generate_email,
    generate_resume,
    summarize_pdf,
)

logger = logging.getLogger(__name__)

router = APIRouter()

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}
UPLOAD_CHUNK_BYTES = 1024 * 64

T = TypeVar("T")

TOOL_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}
PDF_ERROR_RESPONSES = {**TOOL_ERROR_RESPONSES, 413: {"model": ErrorResponse}}
RECORD_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _elapsed_ms(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000))


async def _run_generation(tool: str, call: Awaitable[T]) -> T:
    try:
        return await call
    except Exception as exc:
        logger.exception("generation_failed tool=%s: %s", tool, exc)
        raise ToolRequestError(status.HTTP_500_INTERNAL_SERVER_ERROR, f"{tool}_failed") from exc


async def _persist(store: RecordStore, kind: RecordKind, payload: dict[str, Any]) -> RecordModel:
    try:
        record = await asyncio.to_thread(store.create, kind, payload)
    except RecordStoreError as exc:
        logger.exception("record_persist_failed kind=%s: %s", kind.value, exc)
        raise ToolRequestError(status.HTTP_500_INTERNAL_SERVER_ERROR, "storage_failed") from exc
    logger.info("record_created kind=%s id=%s", kind.value, record.id)
    return record


async def _read_pdf_upload(pdf: UploadFile, max_bytes: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await pdf.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise ToolRequestError(
                status.HTTP_413_CONTENT_TOO_LARGE,
                "pdf_too_large",
                max_mb=max_bytes // (1024 * 1024),
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@router.post("/generate-resume", response_model=ResumeResponse, responses=TOOL_ERROR_RESPONSES)
@tool_rate_limit()
async def generate_resume_endpoint(
    request: Request,
    payload: ResumeRequest,
    client: CompletionClient = Depends(get_generation_client),
    store: RecordStore = Depends(get_record_store),
):
    started = time.perf_counter()
    content = await _run_generation("resume", generate_resume(client, payload))
    processing_time = _elapsed_ms(started)
    record = await _persist(
        store,
        RecordKind.RESUME,
        {**payload.model_dump(), "generated_content": content},
    )
    return ResumeResponse(resume=record, processing_time=processing_time)


@router.post("/correct-arabic", response_model=TextCorrectionResponse, responses=TOOL_ERROR_RESPONSES)
@tool_rate_limit()
async def correct_arabic_endpoint(
    request: Request,
    payload: TextCorrectionRequest,
    client: CompletionClient = Depends(get_generation_client),
    store: RecordStore = Depends(get_record_store),
):
    started = time.perf_counter()
    result = await _run_generation("correction", correct_arabic_text(client, payload.original_text))
    processing_time = _elapsed_ms(started)
    record = await _persist(
        store,
        RecordKind.CORRECTION,
        {
            "original_text": payload.original_text,
            "corrected_text": result.corrected_text,
            "errors_found": result.errors_found,
            "words_improved": result.words_improved,
            "readability_score": result.readability_score,
        },
    )
    return TextCorrectionResponse(correction=record, processing_time=processing_time)


@router.post("/generate-email", response_model=EmailResponse, responses=TOOL_ERROR_RESPONSES)
@tool_rate_limit()
async def generate_email_endpoint(
    request: Request,
    payload: EmailRequest,
    client: CompletionClient = Depends(get_generation_client),
    store: RecordStore = Depends(get_record_store),
):
    started = time.perf_counter()
    content = await _run_generation("email", generate_email(client, payload))
    processing_time = _elapsed_ms(started)
    record = await _persist(
        store,
        RecordKind.EMAIL,
        {**payload.model_dump(), "generated_content": content},
    )
    return EmailResponse(email=record, processing_time=processing_time)


@router.post("/summarize-pdf", response_model=PdfSummaryResponse, responses=PDF_ERROR_RESPONSES)
@tool_rate_limit()
async def summarize_pdf_endpoint(
    request: Request,
    pdf: UploadFile | None = File(None),
    summary_type: str | None = Form(None, alias="summaryType"),
    summary_length: str | None = Form(None, alias="summaryLength"),
    focus_areas: str | None = Form(None, alias="focusAreas"),
    client: CompletionClient = Depends(get_generation_client),
    store: RecordStore = Depends(get_record_store),
    extractor: PdfTextExtractor = Depends(get_pdf_extractor),
):
    if pdf is None or not pdf.filename:
        raise ToolRequestError(status.HTTP_400_BAD_REQUEST, "pdf_missing")
    content_type = (pdf.content_type or "").split(";")[0].strip().lower()
    if content_type not in PDF_CONTENT_TYPES:
        logger.info("pdf_rejected file=%s content_type=%s", pdf.filename, content_type or "-")
        raise ToolRequestError(status.HTTP_400_BAD_REQUEST, "pdf_wrong_type")

    data = await _read_pdf_upload(pdf, settings.pdf_max_upload_bytes)

    summary_type = _blank_to_none(summary_type)
    summary_length = _blank_to_none(summary_length)
    if not summary_type or not summary_length:
        raise ToolRequestError(status.HTTP_400_BAD_REQUEST, "summary_options_missing")
    focus_areas = _blank_to_none(focus_areas)

    file_name = pdf.filename
    extracted = await asyncio.to_thread(
        extract_or_placeholder,
        extractor,
        content=data,
        filename=file_name,
        max_chars=settings.pdf_max_prompt_chars,
    )
    if extracted.warnings:
        logger.info("pdf_text_warnings file=%s warnings=%s", file_name, "; ".join(extracted.warnings))
    started = time.perf_counter()
    result = await _run_generation(
        "summary",
        summarize_pdf(
            client,
            file_name=file_name,
            content=extracted.text,
            summary_type=summary_type,
            summary_length=summary_length,
            focus_areas=focus_areas,
            page_count=extracted.page_count or None,
        ),
    )
    processing_time = _elapsed_ms(started)
    record = await _persist(
        store,
        RecordKind.SUMMARY,
        {
            "file_name": file_name,
            "file_size": len(data),
            "summary_type": summary_type,
            "summary_length": summary_length,
            "focus_areas": focus_areas,
            "original_content": extracted.text,
            "summary_content": result.summary,
            "original_pages": result.original_pages or extracted.page_count,
            "summary_words": result.summary_words,
            "compression_ratio": result.compression_ratio,
            "processing_time": processing_time,
        },
    )
    return PdfSummaryResponse(summary=record, processing_time=processing_time)


@router.post("/generate-code", response_model=CodeGenerationResponse, responses=TOOL_ERROR_RESPONSES)
@tool_rate_limit()
async def generate_code_endpoint(
    request: Request,
    payload: CodeGenerationRequest,
    client: CompletionClient = Depends(get_generation_client),
    store: RecordStore = Depends(get_record_store),
):
    started = time.perf_counter()
    result = await _run_generation("code", generate_code(client, payload))
    processing_time = _elapsed_ms(started)
    record = await _persist(
        store,
        RecordKind.CODE,
        {
            **payload.model_dump(),
            "generated_code": result.code,
            "file_structure": result.file_structure or None,
            "lines_of_code": result.lines_of_code,
            "estimated_time": result.estimated_time,
        },
    )
    return CodeGenerationResponse(code_generation=record, processing_time=processing_time)


@router.get("/records/{kind}/{record_id}", response_model=RecordResponse, responses=RECORD_ERROR_RESPONSES)
async def get_record(kind: RecordKind, record_id: int, store: RecordStore = Depends(get_record_store)):
    try:
        record = await asyncio.to_thread(store.get, kind, record_id)
    except RecordStoreError as exc:
        logger.exception("record_read_failed kind=%s id=%s: %s", kind.value, record_id, exc)
        raise ToolRequestError(status.HTTP_500_INTERNAL_SERVER_ERROR, "storage_failed") from exc
    if record is None:
        raise ToolRequestError(status.HTTP_404_NOT_FOUND, "record_not_found")
    return RecordResponse(record=record)


@router.get("/records/{kind}", response_model=RecordListResponse, responses=RECORD_ERROR_RESPONSES)
async def list_records(
    kind: RecordKind,
    limit: int = Query(20, ge=1, le=100),
    store: RecordStore = Depends(get_record_store),
):
    try:
        records = await asyncio.to_thread(store.list_recent, kind, limit)
    except RecordStoreError as exc:
        logger.exception("record_list_failed kind=%s: %s", kind.value, exc)
        raise ToolRequestError(status.HTTP_500_INTERNAL_SERVER_ERROR, "storage_failed") from exc
    return RecordListResponse(records=records)
