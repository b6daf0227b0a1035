from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import router as api_v1_router
from app.config.logging import get_logger, setup_logging
from app.config.settings import settings
from app.core.exceptions import BaseAppException, ErrorCode
from app.core.middleware import register_middlewares
from app.db.init_db import init_db

logger = get_logger(__name__)


def _failure(status_code: int, message: str, error: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "failed", "body": {}, "message": message, "error": error},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error in the failure envelope."""

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
        logger.info(
            f"{exc.error_code.value}: {exc.message}",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        return _failure(exc.status_code, exc.message, exc.to_dict()["error"])

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        field_errors = {}
        for err in exc.errors():
            name = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            field_errors.setdefault(name or "body", []).append(err.get("msg", "invalid"))
        return _failure(
            422,
            "Validation failed",
            {
                "message": "Validation failed",
                "code": ErrorCode.VALIDATION_ERROR.value,
                "details": {"field_errors": field_errors},
                "type": "ValidationError",
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return _failure(
            500,
            "Internal server error",
            {"message": "Internal server error", "code": ErrorCode.INTERNAL_ERROR.value},
        )


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.on_event("startup")
    async def on_startup() -> None:
        # production schemas are managed outside the app
        if not settings.is_production():
            init_db()

    return app


app = create_app()
