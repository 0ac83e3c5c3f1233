# ========================================
# app/main.py
# ========================================

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, get_settings
from app.database import connect_to_mongo, close_mongo_connection

# ===========================
# IMPORT ALL ROUTERS
# ===========================

from app.routes.application import router as application_router
from app.routes.user import router as user_router

API_PREFIX = "/api/v1"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _field_name(loc) -> str:
    # ("body", "email") -> "email"; ("query", "page") -> "page"
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


# ===========================
# ERROR HANDLERS
# ===========================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [{"field": _field_name(err.get("loc", ())), "message": err.get("msg", "")} for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "details": details},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": "Server error"})


# ===========================
# CREATE FASTAPI APP
# ===========================

def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Store client lives for the whole process and is handed to routes via get_db
        client, db = await connect_to_mongo(settings)
        app.state.mongo_client = client
        app.state.db = db
        try:
            yield
        finally:
            await close_mongo_connection(client)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Job application intake and review API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ===========================
    # CORS MIDDLEWARE
    # ===========================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ===========================
    # REGISTER ROUTERS
    # ===========================
    app.include_router(user_router, prefix=API_PREFIX)
    app.include_router(application_router, prefix=API_PREFIX)

    # ===========================
    # ROOT ENDPOINTS
    # ===========================

    @app.get("/")
    async def root():
        return {
            "success": True,
            "message": "Backend is running!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "success": True,
            "message": "Health check passed",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()
