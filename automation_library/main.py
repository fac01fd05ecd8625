"""
FastAPI application entry point.
"""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from automation_library.routers import api, pages
from automation_library.services.errors import BackendUnavailable, ValidationError
from automation_library.services.store import AutomationStore, build_store
from automation_library.settings import Settings, settings
from automation_library.templates_config import templates

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s" if settings.log_format == "text" else None,
)
logger = logging.getLogger(__name__)


def _wants_json(request: Request) -> bool:
    if request.url.path.startswith("/api/"):
        return True
    accept = request.headers.get("Accept", "")
    return "application/json" in accept and "text/html" not in accept


def _error_page(request: Request, error: str, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"error": error, "status_code": status_code},
        status_code=status_code,
    )


def create_app(store: AutomationStore | None = None, app_settings: Settings = settings) -> FastAPI:
    """Build the application.

    When ``store`` is given it is used as-is (tests); otherwise the store is
    built from settings during startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting {app_settings.app_name} ({app_settings.store_backend} store)...")
        app.state.store = store if store is not None else await build_store(app_settings)
        yield
        logger.info(f"Shutting down {app_settings.app_name}...")
        await app.state.store.close()

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID to all requests for logging."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # Health check endpoint
    @app.get("/healthz", tags=["health"])
    @app.get("/health", tags=["health"])
    async def healthz():
        """Health check endpoint for load balancers."""
        return {"status": "healthy"}

    @app.get("/version", tags=["meta"])
    async def version():
        return {
            "version": app_settings.app_version,
            "store_backend": app_settings.store_backend,
        }

    app.include_router(pages.router)
    app.include_router(api.router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with JSON for the API and an error page for browsers."""
        detail = exc.detail if hasattr(exc, 'detail') else str(exc)

        if exc.status_code >= 500:
            logger.error(f"Server error {exc.status_code}: {detail}")

        if _wants_json(request):
            return JSONResponse({"detail": detail}, status_code=exc.status_code)
        return _error_page(request, detail, exc.status_code)

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError):
        """Store rejected the payload before writing anything."""
        if _wants_json(request):
            return JSONResponse(
                {"detail": str(exc), "errors": exc.errors},
                status_code=422,
            )
        return _error_page(request, str(exc), 422)

    @app.exception_handler(BackendUnavailable)
    async def backend_unavailable_handler(request: Request, exc: BackendUnavailable):
        """Storage is down or misconfigured; the client may retry later."""
        logger.error(f"Backend unavailable on {request.url.path}: {exc}")
        if _wants_json(request):
            return JSONResponse({"detail": "Storage backend unavailable"}, status_code=503)
        return _error_page(request, "The library is temporarily unavailable. Please try again.", 503)

    # Generic exception handler for unhandled errors
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle unhandled exceptions - show error page instead of white screen."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        if _wants_json(request):
            return JSONResponse({"detail": "Internal server error"}, status_code=500)
        return _error_page(request, "An unexpected error occurred", 500)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "automation_library.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
