from __future__ import annotations

import logging
from io import BytesIO
from typing import Protocol

from pypdf import PdfReader

from .models import ExtractedPdf

logger = logging.getLogger(__name__)


class PdfExtractionError(ValueError):
    pass


class PdfTextExtractor(Protocol):
    def extract(self, content: bytes, filename: str) -> ExtractedPdf: ...


class PypdfTextExtractor:
    def extract(self, content: bytes, filename: str) -> ExtractedPdf:
        try:
            reader = PdfReader(BytesIO(content))
            text_parts: list[str] = []
            for page in reader.pages:
                page_text = (page.extract_text() or "").strip()
                if page_text:
                    text_parts.append(page_text)
            page_count = len(reader.pages)
        except Exception as exc:  # noqa: BLE001 - pypdf raises many types on malformed input
            raise PdfExtractionError(f"PDF parsing failed for '{filename}': {exc}") from exc

        warnings: list[str] = []
        if not text_parts:
            warnings.append("No extractable text found in PDF.")
        return ExtractedPdf(text="\n".join(text_parts), page_count=page_count, warnings=warnings)


def placeholder_content(filename: str) -> str:
    return f"PDF content from {filename}"


def extract_or_placeholder(
    extractor: PdfTextExtractor,
    *,
    content: bytes,
    filename: str,
    max_chars: int,
) -> ExtractedPdf:
    """Extract PDF text, falling back to a filename placeholder when nothing usable comes out."""
    try:
        extracted = extractor.extract(content, filename)
    except PdfExtractionError as exc:
        logger.warning("pdf_text_fallback file=%s reason=parse_error: %s", filename, exc)
        return ExtractedPdf(
            text=placeholder_content(filename),
            used_placeholder=True,
            warnings=[str(exc)],
        )

    text = extracted.text.strip()
    if not text:
        logger.warning("pdf_text_fallback file=%s reason=no_text pages=%s", filename, extracted.page_count)
        return extracted.model_copy(
            update={"text": placeholder_content(filename), "used_placeholder": True}
        )

    if max_chars > 0 and len(text) > max_chars:
        logger.info("pdf_text_truncated file=%s chars=%s max=%s", filename, len(text), max_chars)
        text = text[:max_chars]
    return extracted.model_copy(update={"text": text})
