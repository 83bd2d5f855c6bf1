from __future__ import annotations

from pydantic import BaseModel, Field


class ExtractedPdf(BaseModel):
    text: str = ""
    page_count: int = Field(default=0, ge=0)
    used_placeholder: bool = False
    warnings: list[str] = Field(default_factory=list)
