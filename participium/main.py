"""
Participium - FastAPI Application Entry Point

A municipal platform where citizens report civic issues (broken lights,
waste, damaged roads...) and municipal staff triage, assign and resolve them.

DESIGN PRINCIPLES:
- Every report goes through public relations approval before it is public
- Reports are routed to technical offices by category
- Every status change is recorded and notified to the citizen
- The Telegram bot uses the same HTTP API as the web app
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from participium.config.firebase import initialize_firestore
from participium.core.errors import AppError
from participium.core.settings import settings
from participium.routes import admin, citizen, geocode, health, notifications, reports, session, telegram

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def warn_on_insecure_settings(config=settings) -> bool:
    """Log a warning when a real database is paired with the built-in session secret."""
    if config.uses_default_session_secret and not config.USE_MOCK_DB:
        logger.warning("SESSION_SECRET is the built-in default; set a private value before serving real users")
        return True
    return False


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Citizen participation platform for reporting and tracking municipal issues",
    debug=settings.DEBUG
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render domain errors as {"code", "error", "message"}."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Pydantic validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request validation failures are client errors (400)."""
    errors = exc.errors()
    logger.info(f"Validation error on {request.method} {request.url.path}: {errors}")

    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", []) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "code": status.HTTP_400_BAD_REQUEST,
            "error": "BadRequest",
            "message": message,
            "details": [{"loc": list(e.get("loc", [])), "msg": e.get("msg")} for e in errors],
        },
    )


# Global exception handler to catch ALL exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "error": "InternalServerError",
            "message": "Internal server error",
        },
    )


# CORS - origins come from settings, never "*" (cookies are sent cross-origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """
    Initialize services on application startup.
    Currently: Firestore connection
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    warn_on_insecure_settings()
    try:
        initialize_firestore()
    except Exception as e:
        logger.warning(f"Firestore initialization failed: {e}")
        logger.warning("The app will start but database operations may fail.")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")


# Include routers
for module in (health, session, citizen, reports, geocode, notifications, admin, telegram):
    app.include_router(module.router, prefix=API_PREFIX)


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
    }
