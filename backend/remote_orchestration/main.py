"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from remote_orchestration import __version__
from remote_orchestration.config import settings
from remote_orchestration.errors import register_error_handlers
from remote_orchestration.utils.logging import configure_logging, get_logger

configure_logging(settings.log_level)
log = get_logger("main")


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Startup / shutdown lifecycle hook."""
    from remote_orchestration.database import engine

    log.info("remote_orchestration_starting", version=__version__)
    yield
    await engine.dispose()
    log.info("remote_orchestration_stopped")


app = FastAPI(
    title="Remote Orchestration API",
    description="Hosts, federated remotes, tags and their associations",
    version=__version__,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# ── CORS ────────────────────────────────────────
origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Error handling ──────────────────────────────
register_error_handlers(app)


# ── Health ──────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check():
    return {"status": "healthy", "service": "remote-orchestration-api"}


# ── Register routers ───────────────────────────
from remote_orchestration.api.hosts import router as hosts_router      # noqa: E402
from remote_orchestration.api.remotes import router as remotes_router  # noqa: E402
from remote_orchestration.api.tags import router as tags_router        # noqa: E402

app.include_router(hosts_router, prefix=settings.api_prefix)
app.include_router(remotes_router, prefix=settings.api_prefix)
app.include_router(tags_router, prefix=settings.api_prefix)
