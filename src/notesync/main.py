# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import auth_router, collab_router, health_router, notes_router
from .config import get_settings
from .core.errors import register_exception_handlers
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .database import create_tables

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting NoteSync application",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without token revocation...")

    # tests run against their own in-memory database
    if os.getenv("NOTESYNC_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to NOTESYNC_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    logger.info("Shutting down NoteSync application")
    await redis_client.disconnect()


app = FastAPI(
    title=settings.app_name,
    description="Collaborative notes with live presence, per-note roles and an activity trail",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(health_router, prefix="/api")
app.include_router(collab_router)


@app.get("/")
async def root():
    return {"message": "NoteSync API"}


@app.get("/api/")
async def api_root():
    return {
        "message": "NoteSync API",
        "version": __version__,
        "documentation": {"swagger_ui": "/docs", "redoc": "/redoc", "openapi_json": "/openapi.json"},
        "endpoints": {
            "authentication": "/api/auth/",
            "notes": "/api/notes",
            "health": "/api/health/",
            "collaboration": "/ws/collab",
        },
    }


# liveness probe without touching dependencies
@app.get("/health")
async def basic_health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("notesync.main:app", host=settings.host, port=settings.port, reload=settings.reload)
