import logging
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, status, HTTPException as FastAPIHTTPException
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from app.config import settings
from infrastructure.utils.logging_config import logger
from app.exceptions import BaseAppException
from infrastructure.middleware.logging_middleware import LoggingMiddleware
from infrastructure.database.session import close_db_connections, create_db_and_tables_async

# --- API Router Imports ---
from features.users.presentation.api.v1.users_api import router as users_crud_router


# --- Application Lifespan Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles application startup and shutdown events."""
    logger.info(f"Starting up {settings.PROJECT_NAME} v{settings.VERSION} (Env: {settings.ENVIRONMENT})...")
    try:
        await create_db_and_tables_async()
    except Exception as e:
        logger.critical(f"Database setup failed on startup: {e}", exc_info=True)
        raise RuntimeError("Application startup failed due to unmet critical dependencies.") from e
    logger.info("Application startup sequence finished.")
    yield
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    await close_db_connections()
    logger.info("Application shutdown complete.")


# --- Exception Handlers ---
async def base_app_exception_handler(request: Request, exc: BaseAppException):
    req_id = getattr(request.state, 'request_id', None)
    lvl = logging.INFO if exc.status_code < 500 else logging.ERROR
    logger.log(lvl, f"Handled App Exception: {type(exc).__name__}({exc.status_code}) - {exc.detail}", extra={"http.request.id": req_id})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, 'headers', None))

async def http_exception_handler(request: Request, exc: FastAPIHTTPException):
    req_id = getattr(request.state, 'request_id', None)
    lvl = logging.WARNING if 400 <= exc.status_code < 500 else logging.ERROR
    logger.log(lvl, f"HTTPException: {exc.status_code} - {exc.detail}", extra={"http.request.id": req_id})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    req_id = getattr(request.state, 'request_id', None)
    # Log a summary instead of the full potentially large errors list
    error_summary = [{"loc": str(err.get("loc")), "msg": err.get("msg"), "type": err.get("type")} for err in exc.errors()]
    logger.warning("Request validation failed", extra={"http.request.id": req_id, "url": str(request.url), "method": request.method, "errors_summary": error_summary})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "invalid request body"})

async def generic_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, 'request_id', None)
    logger.error(f"Unhandled Server Exception (ID: {req_id})", exc_info=exc, extra={"http.request.id": req_id, "url": str(request.url), "method": request.method})
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "An internal server error occurred."})


def create_app() -> FastAPI:
    # Configure OpenAPI/Docs URLs based on environment
    openapi_url = f"{settings.API_V1_STR}/openapi.json" if settings.ENVIRONMENT != 'production' else None
    docs_url = "/docs" if settings.ENVIRONMENT != 'production' else None

    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="User CRUD service",
        version=settings.VERSION,
        openapi_url=openapi_url,
        docs_url=docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    # --- Middleware Configuration (Order matters!) ---
    if settings.CORS_ORIGINS_LIST:
        logger.info(f"Configuring CORS for origins: {settings.CORS_ORIGINS_LIST}")
        application.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS_LIST,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    application.add_middleware(LoggingMiddleware)
    application.add_middleware(GZipMiddleware, minimum_size=500)

    application.add_exception_handler(BaseAppException, base_app_exception_handler)
    application.add_exception_handler(FastAPIHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(Exception, generic_exception_handler)

    application.include_router(users_crud_router, prefix=settings.API_V1_STR)

    @application.get("/", tags=["_Service"], include_in_schema=False)
    async def root_endpoint():
        """Redirects root path to API documentation (if enabled)."""
        if docs_url:
            return RedirectResponse(url=docs_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
        return {"message": f"Welcome to the {settings.PROJECT_NAME} API!"}

    @application.get("/health", tags=["_Service"], status_code=status.HTTP_200_OK)
    async def health_check_endpoint() -> Dict[str, Any]:
        """Performs a basic health check of the service."""
        return {"status": "ok", "version": settings.VERSION, "environment": settings.ENVIRONMENT}

    return application


app = create_app()


def run() -> None:
    """Starts uvicorn on the configured host and port."""
    import uvicorn
    uvicorn.run(
        "presentation.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=(settings.ENVIRONMENT == "development"),
        log_config=None,
    )


if __name__ == "__main__":
    run()
