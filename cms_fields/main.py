import importlib
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from cms_fields.config import settings
from cms_fields.database import Base, engine
from cms_fields.exception_handlers import register_exception_handlers
from cms_fields.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from cms_fields.routes import containers

logger = logging.getLogger(__name__)


def register_fields() -> None:
    """Import the module that registers the site's containers, if one is configured."""
    if settings.fields_module:
        importlib.import_module(settings.fields_module)
        logger.info(f"Field definitions loaded from {settings.fields_module}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up the application...")
    if settings.debug:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created (if not existing).")
    register_fields()
    yield
    logger.info("Shutting down the application...")


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    setup_structured_logging(settings.log_level, json_format=settings.log_json)

    app = FastAPI(
        title=settings.app_name,
        description="Custom fields and repeaters for content objects",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(StructuredLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(containers.router, prefix="/api/v1")

    @app.get("/health", tags=["Root"])
    def health():
        return {"status": "ok", "version": settings.app_version}

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("cms_fields.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
