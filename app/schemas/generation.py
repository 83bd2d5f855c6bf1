from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50000)]
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
OptionalText = Annotated[str | None, StringConstraints(strip_whitespace=True, max_length=500)]


class RecordKind(str, Enum):
    RESUME = "resume"
    CORRECTION = "correction"
    EMAIL = "email"
    SUMMARY = "summary"
    CODE = "code"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ResumeRequest(RequestModel):
    name: ShortText
    position: ShortText
    contact: RequiredText
    experience: RequiredText
    skills: RequiredText
    education: RequiredText


class TextCorrectionRequest(RequestModel):
    original_text: RequiredText


class EmailRequest(RequestModel):
    email_type: ShortText
    subject: ShortText
    recipient_name: ShortText
    key_points: RequiredText
    tone: ShortText


class CodeGenerationRequest(RequestModel):
    project_title: ShortText
    project_description: RequiredText
    language: ShortText
    framework: OptionalText = None
    features: RequiredText
    code_style: ShortText = "clean"


class RecordModel(CamelModel):
    """Stored result of one generation request. Frozen once created."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int = Field(ge=0)
    created_at: datetime


class ResumeRecord(RecordModel):
    name: str
    position: str
    contact: str
    experience: str
    skills: str
    education: str
    generated_content: str


class TextCorrectionRecord(RecordModel):
    original_text: str
    corrected_text: str
    errors_found: int = 0
    words_improved: int = 0
    readability_score: int = 0


class EmailRecord(RecordModel):
    email_type: str
    subject: str
    recipient_name: str
    key_points: str
    tone: str
    generated_content: str


class PdfSummaryRecord(RecordModel):
    file_name: str
    file_size: int
    summary_type: str
    summary_length: str
    focus_areas: str | None = None
    original_content: str
    summary_content: str
    original_pages: int = 0
    summary_words: int = 0
    compression_ratio: int = 0
    processing_time: int = 0


class CodeGenerationRecord(RecordModel):
    project_title: str
    project_description: str
    language: str
    framework: str | None = None
    features: str
    code_style: str
    generated_code: str
    file_structure: str | None = None
    lines_of_code: int = 0
    estimated_time: int = 0


AnyRecord = ResumeRecord | TextCorrectionRecord | EmailRecord | PdfSummaryRecord | CodeGenerationRecord

RECORD_MODELS: dict[RecordKind, type[RecordModel]] = {
    RecordKind.RESUME: ResumeRecord,
    RecordKind.CORRECTION: TextCorrectionRecord,
    RecordKind.EMAIL: EmailRecord,
    RecordKind.SUMMARY: PdfSummaryRecord,
    RecordKind.CODE: CodeGenerationRecord,
}


class ErrorResponse(CamelModel):
    success: Literal[False] = False
    error: str


class ResumeResponse(CamelModel):
    success: Literal[True] = True
    resume: ResumeRecord
    processing_time: int


class TextCorrectionResponse(CamelModel):
    success: Literal[True] = True
    correction: TextCorrectionRecord
    processing_time: int


class EmailResponse(CamelModel):
    success: Literal[True] = True
    email: EmailRecord
    processing_time: int


class PdfSummaryResponse(CamelModel):
    success: Literal[True] = True
    summary: PdfSummaryRecord
    processing_time: int


class CodeGenerationResponse(CamelModel):
    success: Literal[True] = True
    code_generation: CodeGenerationRecord
    processing_time: int


class RecordResponse(CamelModel):
    success: Literal[True] = True
    record: AnyRecord


class RecordListResponse(CamelModel):
    success: Literal[True] = True
    records: list[AnyRecord] = Field(default_factory=list)
