"""
Fail-open coercion of completion replies into record fields.

Model output is external input: a reply that is not JSON, a JSON value that is
not an object, missing keys and wrongly typed values never raise here. Each
field falls back to a safe default (the original text, an empty string or 0).
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any

from app.normalize.utils import first_number, strip_code_fence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrectionResult:
    corrected_text: str
    errors_found: int = 0
    words_improved: int = 0
    readability_score: int = 0


@dataclass(frozen=True)
class SummaryResult:
    summary: str = ""
    original_pages: int = 0
    summary_words: int = 0
    compression_ratio: int = 0


@dataclass(frozen=True)
class CodeResult:
    code: str = ""
    file_structure: str = ""
    lines_of_code: int = 0
    estimated_time: int = 0


def parse_json_object(text: str | None) -> dict[str, Any]:
    if not text:
        return {}
    try:
        parsed = json.loads(strip_code_fence(text))
    except (TypeError, ValueError) as exc:
        logger.info("model_output_not_json len=%s: %s", len(text), exc)
        return {}
    if not isinstance(parsed, dict):
        logger.info("model_output_not_object type=%s", type(parsed).__name__)
        return {}
    return parsed


def coerce_text(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value if value.strip() else default
    if isinstance(value, (dict, list)):
        if not value:
            return default
        return json.dumps(value, ensure_ascii=False, indent=2)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def coerce_count(value: Any, default: int = 0) -> int:
    """Non-negative integer from an int, float or numeric string; anything else is the default."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        number: float = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        number = value
    elif isinstance(value, str):
        parsed = first_number(value)
        if parsed is None:
            return default
        number = parsed
    else:
        return default
    return max(0, int(round(number)))


def html_or_empty(text: str | None) -> str:
    return text or ""


def correction_defaults(raw: dict[str, Any], original_text: str) -> CorrectionResult:
    return CorrectionResult(
        corrected_text=coerce_text(raw.get("correctedText"), default=original_text),
        errors_found=coerce_count(raw.get("errorsFound")),
        words_improved=coerce_count(raw.get("wordsImproved")),
        readability_score=coerce_count(raw.get("readabilityScore")),
    )


def summary_defaults(raw: dict[str, Any]) -> SummaryResult:
    return SummaryResult(
        summary=coerce_text(raw.get("summary")),
        original_pages=coerce_count(raw.get("originalPages")),
        summary_words=coerce_count(raw.get("summaryWords")),
        compression_ratio=coerce_count(raw.get("compressionRatio")),
    )


def code_defaults(raw: dict[str, Any]) -> CodeResult:
    return CodeResult(
        code=coerce_text(raw.get("code")),
        file_structure=coerce_text(raw.get("fileStructure")),
        lines_of_code=coerce_count(raw.get("linesOfCode")),
        estimated_time=coerce_count(raw.get("estimatedTime")),
    )
