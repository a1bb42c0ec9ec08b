"""
FastAPI Application - Product Catalog Service
Public product listing with admin-only product management
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api import health, products
from app.clients.identity_provider import build_identity_provider
from app.core.config import config
from app.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logger import logger
from app.core.telemetry import instrument_app
from app.db.mongodb import Database
from app.middleware import CorrelationIdMiddleware
from app.services.identity import IdentityVerifier


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup: process-wide clients are built once, before traffic is accepted
    logger.info("Starting Product Catalog Service...")

    database = Database(config)
    await database.connect()
    app.state.database = database

    provider = build_identity_provider(config, database)
    app.state.identity_verifier = IdentityVerifier(provider, timeout=config.external_call_timeout)

    logger.info(
        "Product Catalog Service started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "identity_provider": provider.name,
            "port": config.port
        }
    )

    yield

    # Shutdown
    logger.info("Shutting down Product Catalog Service...")
    await database.close()


app = FastAPI(
    title="Product Catalog Service",
    description="Public product catalog with admin-gated product management",
    version=config.service_version,
    lifespan=lifespan
)

instrument_app(app)

app.add_exception_handler(ErrorResponse, error_response_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(products.router, prefix="/api/products", tags=["products"])


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development"
    )
