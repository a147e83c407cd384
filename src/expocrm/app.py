"""
ExpoCRM Application

FastAPI application for the ExpoCRM event lead capture backend.
"""
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Config
from .services.engine_service import get_engine_service, init_engine_service
from .routes import (
    health_router,
    auth_router,
    events_router,
    contacts_router,
    companies_router,
    follow_ups_router,
    captures_router,
    ai_router,
    notes_router,
    documents_router,
    emails_router,
    enrich_router,
    meetings_router,
    reminders_router,
    dashboard_router,
    spreadsheets_router,
    settings_router,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("expocrm.app")

# Suppress noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("asyncpg").setLevel(logging.WARNING)

# Create FastAPI application
app = FastAPI(
    title="ExpoCRM API",
    description="Lead capture, enrichment and follow-up for events and trade shows",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# Error responses: {"error": "<message>"}
# ============================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    logger.info("Starting ExpoCRM API...")

    try:
        await init_engine_service()
        logger.info("ExpoCRM API started successfully")
    except Exception as e:
        logger.error(f"Failed to start ExpoCRM API: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down ExpoCRM API...")

    try:
        engine = get_engine_service()
        await engine.close()
        logger.info("ExpoCRM API shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# Include routers
app.include_router(health_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(events_router, prefix="/api")
app.include_router(contacts_router, prefix="/api")
app.include_router(companies_router, prefix="/api")
app.include_router(follow_ups_router, prefix="/api")
app.include_router(captures_router, prefix="/api")
app.include_router(ai_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(emails_router, prefix="/api")
app.include_router(enrich_router, prefix="/api")
app.include_router(meetings_router, prefix="/api")
app.include_router(reminders_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")
app.include_router(spreadsheets_router, prefix="/api")
app.include_router(settings_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "ExpoCRM API",
        "version": __version__,
        "status": "running"
    }
