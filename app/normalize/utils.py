from __future__ import annotations

import re

_CODE_FENCE_RE = re.compile(r"^\s*```[A-Za-z0-9_+-]*\s*\n(?P<body>.*?)\n?\s*```\s*$", re.DOTALL)
_NUMBER_RE = re.compile(r"-?\d[\d,]*(?:\.\d+)?")
# Arabic-Indic and Eastern Arabic-Indic digits.
_DIGIT_TRANSLATION = str.maketrans("٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹", "01234567890123456789")


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def strip_code_fence(text: str) -> str:
    match = _CODE_FENCE_RE.match(text or "")
    if not match:
        return (text or "").strip()
    return match.group("body").strip()


def first_number(text: str) -> float | None:
    """First number in free text such as '12 hours' or '٤٥%'."""
    match = _NUMBER_RE.search((text or "").translate(_DIGIT_TRANSLATION))
    if not match:
        return None
    try:
        return float(match.group(0).replace(",", ""))
    except ValueError:
        return None
