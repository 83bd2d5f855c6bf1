from __future__ import annotations

import logging
from typing import Any

from app.core.config import settings

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Content-Type", "Accept", "Accept-Language"]


def cors_middleware_options() -> dict[str, Any]:
    """Keyword arguments for CORSMiddleware built from settings."""
    origins = list(settings.cors_allowed_origins)
    regex = (settings.cors_allow_origin_regex or "").strip() or None
    allow_credentials = settings.cors_allow_credentials
    # Browsers reject credentialed responses for a wildcard origin.
    if allow_credentials and "*" in origins:
        logger.warning("cors_credentials_disabled reason=wildcard_origin")
        allow_credentials = False
    return {
        "allow_origins": origins,
        "allow_origin_regex": regex,
        "allow_credentials": allow_credentials,
        "allow_methods": CORS_ALLOWED_METHODS,
        "allow_headers": CORS_ALLOWED_HEADERS,
    }
