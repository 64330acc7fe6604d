"""
FastAPI API Service Entry Point
"""

import logging
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.routes import parse
from shared.config import get_settings
from shared.logging_config import configure_logging
from shared.startup_validator import StartupValidationError, validate_startup_config

SERVICE_NAME = "RBP Time Parser"
SERVICE_VERSION = "1.0.0"

# Configure structured JSON logging on startup
configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
)

app.include_router(parse.router, tags=["parse"])


@app.on_event("startup")
async def startup_config_validation():
    """
    Validate critical configuration at startup.

    Raises:
        StartupValidationError: If critical configuration is invalid
    """
    logger.info("Running API startup configuration validation...")
    try:
        await validate_startup_config()
        logger.info("API startup configuration validation passed")
    except StartupValidationError as e:
        logger.critical(f"API startup blocked due to configuration errors: {e}")
        raise  # FastAPI will fail to start


# Malformed bodies (not JSON, wrong types) use the service error shape
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with the service error payload."""
    return JSONResponse(
        status_code=400,
        content={"error": True, "mensaje": "Cuerpo de la petición inválido."},
    )


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint for Docker health checks and monitoring."""
    return JSONResponse(
        status_code=200,
        content={
            "status": "ok",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}


if __name__ == "__main__":
    uvicorn.run("api.main:app", host="0.0.0.0", port=get_settings().PORT)
