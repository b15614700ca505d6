"""
FastAPI application for the Job Copilot API.

Mounts every /api router, translates the service-layer exception taxonomy
into JSON responses, bootstraps indexes and the admin account at startup,
and optionally serves the built client with an index.html fallback.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse

from src.common.database import DatabaseClient, ensure_indexes
from src.common.error_handling import AppError, NotFoundError, log_on_exception
from src.common.logger import setup_logging
from src.services.auth_service import AuthService
from version import __version__

from .config import settings, validate_config_on_startup
from .dependencies import get_db
from .routes import (
    admin_router,
    ai_router,
    analytics_router,
    applications_router,
    auth_router,
    jobs_router,
    matching_router,
    resumes_router,
    users_router,
)

# Configure logging
setup_logging(level=settings.log_level, format=settings.log_format)
logger = logging.getLogger(__name__)

# Validate configuration at startup
validate_config_on_startup()

WELCOME_MESSAGE = "Welcome to the AI Resume Builder API"
GENERIC_ERROR = "Something went wrong!"

app = FastAPI(title="Job Copilot API", version=__version__)

# Configure CORS using validated settings
if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_origins_list != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include modular route handlers
app.include_router(users_router)
app.include_router(auth_router)
app.include_router(resumes_router)
app.include_router(jobs_router)
app.include_router(applications_router)
app.include_router(analytics_router)
app.include_router(admin_router)
app.include_router(ai_router)
app.include_router(matching_router)


# =============================================================================
# Exception handlers
# =============================================================================


def validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """
    Flatten pydantic errors to [{"msg", "param"}].

    Messages raised by model validators are passed through verbatim;
    param is the dotted field path inside the body or query string.
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        param = ".".join(loc[1:]) if loc and loc[0] in ("body", "query", "path") else ".".join(loc)
        error_type = error.get("type", "")

        if error_type == "value_error":
            msg = str(error.get("msg", "")).removeprefix("Value error, ")
        elif error_type == "missing":
            msg = f"{param} is required" if param else "Request body is required"
        else:
            msg = f"Invalid value for {param}" if param else "Invalid request body"

        errors.append({"msg": msg, "param": param})
    return errors


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": validation_errors(exc)})


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"msg": GENERIC_ERROR})


# =============================================================================
# Startup
# =============================================================================


@app.on_event("startup")
async def bootstrap_database() -> None:
    """Create indexes and the configured admin account."""
    db = get_db()
    ensure_indexes(db)

    with log_on_exception(logger, "Admin bootstrap", level=logging.ERROR, include_traceback=True):
        AuthService(db, jwt_secret=settings.jwt_secret).ensure_admin(
            settings.admin_id, settings.admin_password
        )


@app.on_event("shutdown")
async def close_database() -> None:
    DatabaseClient().disconnect()


# =============================================================================
# Root and static client
# =============================================================================


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return WELCOME_MESSAGE


def _static_root() -> Path:
    return Path(settings.static_dir).resolve()


if settings.serve_static and _static_root().is_dir():
    logger.info(f"Serving client build from {_static_root()}")

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_client(full_path: str) -> FileResponse:
        """Serve a built asset, or index.html for client-side routes."""
        if full_path.startswith("api/"):
            raise NotFoundError("Not found")

        root_dir = _static_root()
        candidate = (root_dir / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(root_dir):
            return FileResponse(candidate)
        return FileResponse(root_dir / "index.html")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api_service.app:app", host="0.0.0.0", port=settings.port)
