"""
Main FastAPI application for the Escriba backend.
Handles CORS, request logging middleware, lifespan events, and router registration.
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from escriba.config import settings
from escriba.database import close_db, init_db
from escriba.routers import abstracts, ai, health, projects, sections, smart_articles

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Startup / shutdown helpers
# ---------------------------------------------------------------------------

def _check_ai_config() -> dict:
    """Log which model endpoints have credentials.  Never raises."""
    result = {
        "gateway": bool(settings.AI_GATEWAY_API_KEY),
        "abstract": bool(settings.OPENAI_API_KEY),
    }
    if result["gateway"]:
        logger.info(
            "✓ AI gateway: %s (model %s)", settings.AI_GATEWAY_URL, settings.AI_SUGGESTION_MODEL
        )
    else:
        logger.warning("⚠ AI_GATEWAY_API_KEY not set — suggestions and tips will return 503")

    if result["abstract"]:
        logger.info(
            "✓ Abstract model: %s (model %s)", settings.OPENAI_BASE_URL, settings.AI_ABSTRACT_MODEL
        )
    else:
        logger.warning("⚠ OPENAI_API_KEY not set — abstract generation will return 503")
    return result


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown event handler."""
    logger.info("Starting Escriba backend …")

    # Database is required; init_db raises on failure
    await init_db()
    logger.info("✓ Database connection OK")

    _check_ai_config()

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    logger.info("✓ Upload directory: %s", os.path.abspath(settings.UPLOAD_DIR))
    logger.info("Escriba backend ready on http://%s:%d (docs at /docs)", settings.HOST, settings.PORT)

    yield  # ← server is running

    logger.info("Shutting down Escriba backend …")
    await close_db()
    logger.info("✓ Shutdown complete.")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Escriba API",
    description=(
        "**Escriba** — guided academic article writing.\n\n"
        "Create a project, write its sections step by step (each step "
        "unlocks once the previous one meets its word count), ask the model "
        "for suggestions, and generate the abstract in Portuguese and/or "
        "English.\n\n"
        "Key endpoints:\n"
        "- `POST /api/projects` — create a project\n"
        "- `PUT  /api/projects/{id}/sections/{section}` — auto-save a section\n"
        "- `GET  /api/projects/{id}/progress` — step gating state\n"
        "- `POST /api/projects/{id}/abstract/generate` — draft the abstract\n"
        "- `POST /api/smart-articles` — start from an uploaded draft\n"
        "- `POST /api/ai/analyze-text` — stateless suggestions\n"
    ),
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request / response logging middleware
# ---------------------------------------------------------------------------

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log every request with method, path, status code, and elapsed time.
    Attaches an ``X-Process-Time`` header (milliseconds) to every response.
    """
    t0 = time.monotonic()
    response = await call_next(request)
    elapsed_ms = round((time.monotonic() - t0) * 1000, 2)

    # Skip health-check polling
    if request.url.path not in ("/api/health", "/api/health/", "/"):
        logger.info(
            "%s %s → %d  (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )

    response.headers["X-Process-Time"] = f"{elapsed_ms}ms"
    return response


# ---------------------------------------------------------------------------
# Global exception handler
# ---------------------------------------------------------------------------

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return a structured JSON error for any unhandled exception."""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error": str(exc),
            "path": str(request.url.path),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(health.router,         prefix="/api/health",         tags=["Health"])
app.include_router(projects.router,       prefix="/api/projects",       tags=["Projects"])
app.include_router(sections.router,       prefix="/api/projects",       tags=["Sections"])
app.include_router(abstracts.router,      prefix="/api/projects",       tags=["Abstract"])
app.include_router(smart_articles.router, prefix="/api/smart-articles", tags=["Smart article"])
app.include_router(ai.router,             prefix="/api/ai",             tags=["AI"])


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

@app.get("/", tags=["Root"], include_in_schema=False)
async def root():
    """API root — returns basic service info."""
    return {
        "name": "Escriba API",
        "version": "0.1.0",
        "description": "Academic Writing Assistant Backend",
        "docs": "/docs",
        "health": "/api/health",
        "endpoints": {
            "projects": "/api/projects",
            "smart_articles": "/api/smart-articles",
            "ai": "/api/ai",
        },
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "escriba.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        log_level="info",
    )
