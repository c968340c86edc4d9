"""
Main FastAPI application for the knowledge reference service.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import knowledge
from .services import get_services, initialize_services
from config.settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Knowledge reference service starting up...")

    # Initialize database (if configured)
    if settings.database_url:
        try:
            from database.session import init_db
            await init_db(settings.database_url)
            logger.info("Database initialized")
        except Exception as e:
            logger.warning(f"Database init failed (running without DB): {e}")

    initialize_services(settings)
    logger.info("Knowledge reference service ready")
    yield
    logger.info("Knowledge reference service shutting down...")

    await get_services().aclose()

    if settings.database_url:
        from database.session import close_db
        await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Knowledge base search references and reranking for chat messages.",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(knowledge.router, prefix="/api/v1", tags=["Knowledge"])

    @app.get("/")
    async def root():
        return {
            "service": "Knowledge Reference Service",
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health():
        services = get_services()
        return {
            "status": "healthy" if services.is_ready else "degraded",
            "services": services.health(),
        }

    return app


# Create app instance
app = create_app()
