"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pathwise.api.routes import chats, content, practice, roadmaps
from pathwise.clients.tutor_api import get_tutor_client
from pathwise.core.config import get_settings
from pathwise.core.database import close_db, init_db
from pathwise.core.logging import configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    configure_logging(debug=settings.DEBUG)
    logger.info(
        "Starting Pathwise",
        version=settings.APP_VERSION,
        env=settings.ENV,
        debug=settings.DEBUG,
        tutor_api=settings.TUTOR_API_BASE_URL,
    )
    await init_db()
    app.state.tutor_client = get_tutor_client()
    yield
    # Shutdown
    logger.info("Shutting down Pathwise")
    await app.state.tutor_client.aclose()
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="AI-assisted learning roadmaps, tutoring chat and practice",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chats.router, prefix="/api")
app.include_router(practice.router, prefix="/api")
app.include_router(content.router, prefix="/api")
app.include_router(roadmaps.router, prefix="/api")


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "env": settings.ENV,
    }


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("pathwise.main:app", host=settings.HOST, port=settings.PORT)
