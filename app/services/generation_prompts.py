from __future__ import annotations

from app.ai.types import ChatMessage
from app.normalize.utils import normalize_line

SUMMARY_LENGTH_INSTRUCTIONS = {
    "short": "200-300 words",
    "medium": "500-700 words",
    "long": "1000+ words",
}


def _lines(*parts: str) -> str:
    return "\n".join(parts).strip()


def build_resume_messages(
    *,
    name: str,
    position: str,
    contact: str,
    experience: str,
    skills: str,
    education: str,
) -> list[ChatMessage]:
    user = _lines(
        "Create a professional resume in Arabic for the following person. "
        "Format it as clean HTML with proper RTL styling.",
        "",
        f"Name: {name}",
        f"Desired Position: {position}",
        f"Contact Info: {contact}",
        f"Experience: {experience}",
        f"Skills: {skills}",
        f"Education: {education}",
        "",
        "Create a well-structured, professional resume in Arabic with appropriate sections and formatting.",
        "Return only the HTML content without any wrapper elements.",
    )
    return [ChatMessage(role="user", content=user)]


def build_correction_messages(text: str) -> list[ChatMessage]:
    system = (
        "You are an expert Arabic language corrector. "
        "Provide corrections and improvements in JSON format."
    )
    user = _lines(
        "Correct and improve the following Arabic text. Fix grammar, spelling and style issues "
        "while keeping the original meaning.",
        "",
        f"Original text: {text}",
        "",
        "Respond with JSON in this format:",
        "{",
        '  "correctedText": "the corrected Arabic text",',
        '  "errorsFound": number of errors found,',
        '  "wordsImproved": number of words improved,',
        '  "readabilityScore": readability score from 0-100',
        "}",
    )
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)]


def build_email_messages(
    *,
    email_type: str,
    subject: str,
    recipient_name: str,
    key_points: str,
    tone: str,
) -> list[ChatMessage]:
    system = (
        "You are an expert in writing professional Arabic emails. "
        "Create formal, well-structured emails."
    )
    user = _lines(
        "Create a professional email in Arabic with the following details:",
        "",
        f"Email Type: {email_type}",
        f"Subject: {subject}",
        f"Recipient Name: {recipient_name}",
        f"Key Points: {key_points}",
        f"Tone: {tone}",
        "",
        "Write a well-structured, professional email in Arabic that includes:",
        "- Proper greeting",
        "- Clear subject line",
        "- Well-organized content based on the key points",
        "- Appropriate closing",
        "- Professional tone matching the requested style",
        "",
        "Format the response as HTML with proper RTL styling.",
    )
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)]


def build_summary_messages(
    *,
    file_name: str,
    content: str,
    summary_type: str,
    summary_length: str,
    focus_areas: str | None = None,
    page_count: int | None = None,
) -> list[ChatMessage]:
    system = "You are an expert in creating summaries of academic and professional documents in Arabic."
    length = SUMMARY_LENGTH_INSTRUCTIONS.get(summary_length, summary_length)
    parts = [
        f"Create a {summary_type} summary of the following PDF content in Arabic.",
        "",
        f"File name: {file_name}",
        f"Summary length: {length}",
    ]
    if page_count:
        parts.append(f"The document has {page_count} pages.")
    if focus_areas:
        parts.append(f"Focus areas: {normalize_line(focus_areas)}")
    parts.extend(
        [
            "",
            f"Content: {content}",
            "",
            "Respond with JSON in this format:",
            "{",
            '  "summary": "the summary in Arabic",',
            '  "keyPoints": ["key point 1", "key point 2"],',
            '  "originalPages": estimated number of pages,',
            '  "summaryWords": number of words in summary,',
            '  "compressionRatio": percentage of compression',
            "}",
        ]
    )
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=_lines(*parts))]


def build_code_messages(
    *,
    project_title: str,
    project_description: str,
    language: str,
    framework: str | None,
    features: str,
    code_style: str,
) -> list[ChatMessage]:
    system = (
        "You are an expert senior software developer with years of experience in creating professional, "
        "secure and scalable applications. Provide complete, production-ready code solutions with proper "
        "architecture and best practices."
    )
    user = _lines(
        "Create a professional and complete code solution for the following project:",
        "",
        f"Project Title: {project_title}",
        f"Project Description: {project_description}",
        f"Programming Language: {language}",
        f"Framework: {framework or 'None specified'}",
        f"Required Features: {features}",
        f"Code Style: {code_style}",
        "",
        "Provide a complete, production-ready code solution with:",
        "1. Clean, well-structured code following best practices",
        "2. Proper error handling and validation",
        "3. Comments in Arabic for key functions",
        "4. Secure and efficient implementation",
        "5. Responsive design (if applicable)",
        "",
        "Respond with JSON in this format:",
        "{",
        '  "code": "the complete code solution",',
        '  "fileStructure": "recommended file/folder structure",',
        '  "linesOfCode": estimated number of lines,',
        '  "estimatedTime": estimated development time in hours,',
        '  "technicalNotes": "important technical considerations"',
        "}",
    )
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)]
