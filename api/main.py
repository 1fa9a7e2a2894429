"""FastAPI application entry point"""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from api.dependencies import init_dependencies
from api.routers import schedules, prospection, system
from content_scheduler.core.init import init_services
from content_scheduler.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the scheduler services with the API and stop them on shutdown"""
    logger.info("🚀 Starting Content Scheduler API...")
    services = init_services()
    init_dependencies(
        publication_scheduler=services.publication_scheduler,
        prospection=services.prospection,
        daily_job=services.daily_job
    )
    await services.start()
    logger.info("✅ API ready")
    yield
    logger.info("🛑 Shutting down API...")
    await services.stop()


def create_app(with_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI app (tests skip the lifespan and inject dependencies)"""
    app = FastAPI(
        title="Content Scheduler API",
        description="Deferred publication and outreach scheduler",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan if with_lifespan else None
    )

    app.include_router(schedules.router)
    app.include_router(prospection.router)
    app.include_router(system.router)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Content Scheduler API",
            "version": "1.0.0",
            "docs": "/api/docs"
        }

    return app


app = create_app()
