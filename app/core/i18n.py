from __future__ import annotations

from app.core.config import SUPPORTED_LOCALES, settings

_MESSAGES: dict[str, dict[str, str]] = {
    "invalid_field": {
        "en": "Missing or invalid field: {field}. Please check your input and try again.",
        "ar": "الحقل {field} مفقود أو غير صالح. يرجى مراجعة المدخلات والمحاولة مرة أخرى.",
    },
    "invalid_request": {
        "en": "The request could not be read. Please check your input and try again.",
        "ar": "تعذر قراءة الطلب. يرجى مراجعة المدخلات والمحاولة مرة أخرى.",
    },
    "pdf_missing": {
        "en": "Please upload a PDF file.",
        "ar": "يرجى رفع ملف PDF.",
    },
    "pdf_wrong_type": {
        "en": "Only PDF files are supported.",
        "ar": "يتم دعم ملفات PDF فقط.",
    },
    "pdf_too_large": {
        "en": "File too large. Maximum allowed size is {max_mb} MB.",
        "ar": "حجم الملف كبير جداً. الحد الأقصى المسموح به هو {max_mb} ميغابايت.",
    },
    "summary_options_missing": {
        "en": "Please specify summary type and length.",
        "ar": "يرجى تحديد نوع التلخيص وطوله.",
    },
    "resume_failed": {
        "en": "Failed to generate resume. Please check your input and try again.",
        "ar": "تعذر إنشاء السيرة الذاتية. يرجى مراجعة المدخلات والمحاولة مرة أخرى.",
    },
    "correction_failed": {
        "en": "Failed to correct Arabic text. Please try again.",
        "ar": "تعذر تصحيح النص العربي. يرجى المحاولة مرة أخرى.",
    },
    "email_failed": {
        "en": "Failed to generate email. Please check your input and try again.",
        "ar": "تعذر إنشاء البريد الإلكتروني. يرجى مراجعة المدخلات والمحاولة مرة أخرى.",
    },
    "summary_failed": {
        "en": "Failed to summarize PDF. Please try again with a valid PDF file.",
        "ar": "تعذر تلخيص ملف PDF. يرجى المحاولة مرة أخرى بملف صالح.",
    },
    "code_failed": {
        "en": "Failed to generate code. Please check your input and try again.",
        "ar": "تعذر إنشاء الكود. يرجى مراجعة المدخلات والمحاولة مرة أخرى.",
    },
    "storage_failed": {
        "en": "Your result was generated but could not be saved. Please try again.",
        "ar": "تم إنشاء النتيجة لكن تعذر حفظها. يرجى المحاولة مرة أخرى.",
    },
    "record_not_found": {
        "en": "Record not found.",
        "ar": "السجل غير موجود.",
    },
    "rate_limited": {
        "en": "Too many requests. Please wait a minute and try again.",
        "ar": "طلبات كثيرة جداً. يرجى الانتظار دقيقة ثم المحاولة مرة أخرى.",
    },
    "internal_error": {
        "en": "Something went wrong. Please try again.",
        "ar": "حدث خطأ غير متوقع. يرجى المحاولة مرة أخرى.",
    },
}


def normalize_locale(lang: str | None) -> str:
    """Pick the first supported language from an Accept-Language style value."""
    if not lang:
        return settings.default_locale
    for part in lang.split(","):
        code = part.split(";")[0].strip().lower().split("-")[0]
        if code in SUPPORTED_LOCALES:
            return code
    return settings.default_locale


def message(key: str, locale: str | None = None, **params: object) -> str:
    templates = _MESSAGES.get(key) or _MESSAGES["internal_error"]
    template = templates.get(normalize_locale(locale), templates["en"])
    return template.format(**params) if params else template
