from app.ai.config import load_ai_config
from app.ai.policies import apply_policies
from app.ai.types import CompletionClient
from app.core.config import settings

from app.ai.providers.mock_provider import MockCompletionClient
from app.ai.providers.openai_provider import from_config


def get_completion_client() -> CompletionClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        client: CompletionClient = from_config(cfg)
    elif cfg.provider == "mock":
        client = MockCompletionClient()
    else:
        raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")

    return apply_policies(
        client,
        timeout_s=settings.generation_timeout_s,
        retries=settings.generation_retries,
        backoff_s=settings.generation_retry_backoff_s,
    )
