"""
FastAPI Application Entry Point.

This is the main application file for the FastShift parcel delivery backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from fastshift.app.core.config import settings
from fastshift.app.api.v1.router import router as api_v1_router
from fastshift.app.core.identity import build_identity_provider
from fastshift.app.core.observability import ObservabilityMiddleware, configure_logging
from fastshift.app.db.session import Database
from fastshift.app.services.payment_gateway import build_payment_gateway
from fastshift.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    store_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from fastshift.app.models.parcel import Parcel
from fastshift.app.models.payment import Payment
from fastshift.app.models.user import User
from fastshift.app.models.rider import Rider
from fastshift.app.models.tracking import TrackingEvent

logger = logging.getLogger("fastshift")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Builds the storage context, identity provider and payment gateway once.
    2. Creates database tables on startup.
    3. Disposes of connections and HTTP clients on shutdown.
    """
    configure_logging(settings.log_level)
    database = Database.from_settings(settings)
    await database.create_all()

    app.state.database = database
    app.state.identity_provider = build_identity_provider(settings)
    app.state.payment_gateway = build_payment_gateway(settings)
    logger.info("%s %s started (identity provider: %s)",
                settings.app_name, settings.app_version, settings.identity_provider)
    yield

    await app.state.payment_gateway.aclose()
    await app.state.identity_provider.aclose()
    await database.dispose()
    logger.info("%s shut down", settings.app_name)


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description="Parcel delivery coordination backend",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
    }


app.include_router(api_v1_router, prefix=settings.api_prefix)


@app.get("/", tags=["Root"])
async def root():
    return {"message": "FastShift Server is Running", "docs": "/docs", "health": "/health"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fastshift.app.main:app", host=settings.host, port=settings.port, reload=settings.debug)
