"""FastAPI application entry point."""

import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import (
    entries_router,
    health_router,
    periods_router,
    settings_router,
    transfer_router,
)
from core import config
from core.config import API_DEBUG, API_VERSION


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: make sure the database directory can be created
    try:
        config.DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        warnings.warn(f"Database directory not writable at {config.DB_PATH.parent}: {e}")

    yield


app = FastAPI(
    title="Timesheet Tracker API",
    description="REST API for tracking work hours, overtime, leave, and pay periods",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Return route errors in the standard error format."""
    if isinstance(exc.detail, dict):
        content = ErrorResponse(**exc.detail).model_dump()
    else:
        code = ErrorCodes.NOT_FOUND if exc.status_code == 404 else ErrorCodes.INVALID_REQUEST
        content = ErrorResponse(error=str(exc.detail), code=code, details=[]).model_dump()
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location}: {error.get('msg', 'invalid value')}")
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="Invalid request",
            code=ErrorCodes.VALIDATION_ERROR,
            details=details,
        ).model_dump(),
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(entries_router)
app.include_router(periods_router)
app.include_router(settings_router)
app.include_router(transfer_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
