from contextlib import asynccontextmanager
import logging

from app.ai.config import load_ai_config
from app.api.deps import get_record_store
from app.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    ai_cfg = load_ai_config()
    logger.info(
        "startup provider=%s model=%s record_store=%s locale=%s",
        ai_cfg.provider,
        ai_cfg.model,
        settings.record_store_backend,
        settings.default_locale,
    )
    store = get_record_store()
    yield
    close = getattr(store, "close", None)
    if callable(close):
        close()
        logger.info("record_store_closed backend=%s", settings.record_store_backend)
