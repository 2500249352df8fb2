"""
FastAPI application entry point.

Configures the API with all routes, middleware, and error handling.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from accounts.auth.validation import ATTRIBUTES
from accounts.config import load_config
from accounts.exceptions import UnauthorizedError, ValidationError

from .v1.router import router as v1_router
from .deps import get_services, close_services

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

# Messages for request body type errors, keyed by pydantic error type
TYPE_MESSAGES = {
    "string_type": "The {attribute} field must be a string.",
    "bool_type": "The {attribute} field must be true or false.",
    "bool_parsing": "The {attribute} field must be true or false.",
    "json_invalid": "The request body must be valid JSON.",
}


def _error_field(error: dict) -> str:
    """Field an error is reported under; errors about the whole body use 'body'."""
    loc = error.get("loc", ())
    if error.get("type") == "json_invalid" or len(loc) < 2 or not isinstance(loc[-1], str):
        return "body"
    return loc[-1]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting Accounts API...")

    services = get_services()
    services.context.tokens.prune_expired()

    yield

    logger.info("Shutting down...")
    close_services()


app = FastAPI(
    title="Accounts API",
    description="User registration, login and logout with bearer tokens",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=load_config().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def validation_response(errors: Dict[str, List[str]], message: str = "Validation Error") -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": errors, "message": message}
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """ValidationError and ConflictError -> 400 with field messages."""
    return validation_response(exc.errors, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies use the same envelope as field validation."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = _error_field(error)
        template = TYPE_MESSAGES.get(error.get("type"))
        if template:
            message = template.format(attribute=ATTRIBUTES.get(field, field))
        else:
            message = error.get("msg", "Invalid value.")
        errors.setdefault(field, []).append(message)

    return validation_response(errors)


@app.exception_handler(UnauthorizedError)
async def unauthorized_error_handler(request: Request, exc: UnauthorizedError):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"message": exc.message},
        headers=exc.headers
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error"}
    )


# Health check
@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "accounts-api"}


# Include API v1 routes
app.include_router(v1_router, prefix="/api/v1")


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """API root endpoint."""
    return {
        "name": "Accounts API",
        "version": "1.0.0",
        "docs": "/docs"
    }


def main():
    """Run the API server."""
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))

    logger.info(f"Starting Accounts API on {host}:{port}...")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
