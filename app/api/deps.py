from __future__ import annotations

from functools import lru_cache

from app.ai.factory import get_completion_client
from app.ai.types import CompletionClient
from app.core.record_store import RecordStore, build_record_store
from app.parsing.pdf_text import PdfTextExtractor, PypdfTextExtractor


@lru_cache(maxsize=1)
def _record_store() -> RecordStore:
    return build_record_store()


@lru_cache(maxsize=1)
def _completion_client() -> CompletionClient:
    return get_completion_client()


def get_record_store() -> RecordStore:
    return _record_store()


def get_generation_client() -> CompletionClient:
    return _completion_client()


def get_pdf_extractor() -> PdfTextExtractor:
    return PypdfTextExtractor()
