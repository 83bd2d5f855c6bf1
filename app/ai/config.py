import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    base_url: str | None
    timeout_s: float
    max_retries: int


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o").strip()
    return AIConfig(
        provider=provider,
        model=model,
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip() or None,
        base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        timeout_s=_float_env("OPENAI_TIMEOUT_S", 60.0),
        max_retries=_int_env("OPENAI_MAX_RETRIES", 0),
    )
