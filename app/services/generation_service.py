from __future__ import annotations

import logging

from app.ai.types import CompletionClient
from app.normalize.model_output import (
    CodeResult,
    CorrectionResult,
    SummaryResult,
    code_defaults,
    correction_defaults,
    html_or_empty,
    parse_json_object,
    summary_defaults,
)
from app.schemas.generation import CodeGenerationRequest, EmailRequest, ResumeRequest
from app.services.generation_prompts import (
    build_code_messages,
    build_correction_messages,
    build_email_messages,
    build_resume_messages,
    build_summary_messages,
)

logger = logging.getLogger(__name__)

RESUME_MAX_TOKENS = 2000
CORRECTION_MAX_TOKENS = 1500
EMAIL_MAX_TOKENS = 1500
SUMMARY_MAX_TOKENS = 2000
CODE_MAX_TOKENS = 4000


async def generate_resume(client: CompletionClient, request: ResumeRequest) -> str:
    messages = build_resume_messages(
        name=request.name,
        position=request.position,
        contact=request.contact,
        experience=request.experience,
        skills=request.skills,
        education=request.education,
    )
    content = await client.generate(messages, max_tokens=RESUME_MAX_TOKENS)
    return html_or_empty(content)


async def correct_arabic_text(client: CompletionClient, text: str) -> CorrectionResult:
    reply = await client.generate(
        build_correction_messages(text),
        json_mode=True,
        max_tokens=CORRECTION_MAX_TOKENS,
    )
    return correction_defaults(parse_json_object(reply), original_text=text)


async def generate_email(client: CompletionClient, request: EmailRequest) -> str:
    messages = build_email_messages(
        email_type=request.email_type,
        subject=request.subject,
        recipient_name=request.recipient_name,
        key_points=request.key_points,
        tone=request.tone,
    )
    content = await client.generate(messages, max_tokens=EMAIL_MAX_TOKENS)
    return html_or_empty(content)


async def summarize_pdf(
    client: CompletionClient,
    *,
    file_name: str,
    content: str,
    summary_type: str,
    summary_length: str,
    focus_areas: str | None = None,
    page_count: int | None = None,
) -> SummaryResult:
    messages = build_summary_messages(
        file_name=file_name,
        content=content,
        summary_type=summary_type,
        summary_length=summary_length,
        focus_areas=focus_areas,
        page_count=page_count,
    )
    reply = await client.generate(messages, json_mode=True, max_tokens=SUMMARY_MAX_TOKENS)
    result = summary_defaults(parse_json_object(reply))
    if not result.summary:
        logger.info("summary_empty file=%s", file_name)
    return result


async def generate_code(client: CompletionClient, request: CodeGenerationRequest) -> CodeResult:
    messages = build_code_messages(
        project_title=request.project_title,
        project_description=request.project_description,
        language=request.language,
        framework=request.framework,
        features=request.features,
        code_style=request.code_style,
    )
    reply = await client.generate(messages, json_mode=True, max_tokens=CODE_MAX_TOKENS)
    return code_defaults(parse_json_object(reply))
