import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware
import sentry_sdk

from app.api.errors import register_error_handlers
from app.api.v1.generation import router as generation_router
from app.api.v1.health import router as health_router
from app.core.config import settings
from app.core.cors import cors_middleware_options
from app.core.lifespan import lifespan
from app.core.rate_limit import limiter

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn, send_default_pii=False)

app = FastAPI(
    title="Arabic AI Tools API",
    version="0.1.0",
    description="Resume, Arabic correction, email, PDF summary and code generation tools.",
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, **cors_middleware_options())
app.state.limiter = limiter
register_error_handlers(app)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(generation_router, prefix="/api", tags=["Tools"])
