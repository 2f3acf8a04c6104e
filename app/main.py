# app/main.py
import uvicorn
import os
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.exceptions import FinanceTrackerError, StoreError
from app.crud.session import purge_expired_sessions
from app.crud.user import backfill_missing_emails
from app.api.v1.api import api_router

logger = logging.getLogger(__name__)


async def run_startup_maintenance(db: Database, settings: Settings) -> None:
    """Schema (dev only), legacy email backfill and expired session cleanup"""
    if settings.CREATE_TABLES_ON_STARTUP:
        await db.create_all()
        logger.info("✅ Database tables created successfully")

    async with db.sessionmaker() as session:
        if settings.MIGRATE_LEGACY_USERS:
            migrated, skipped = await backfill_missing_emails(settings.LEGACY_EMAIL_DOMAIN, session)
            if migrated:
                logger.info(f"Migrated {migrated} users without an email address")
            if skipped:
                logger.warning(f"⚠️ Skipped {skipped} users whose placeholder email is already taken")
            if not migrated and not skipped:
                logger.info("No users need migration")
        purged = await purge_expired_sessions(session)
        if purged:
            logger.info(f"Purged {purged} expired sessions")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = Database(settings)
        app.state.db = db
        try:
            await run_startup_maintenance(db, settings)
            logger.info(f"✅ {settings.APP_NAME} started ({settings.ENVIRONMENT})")
            if settings.ENVIRONMENT == "production" and settings.SECRET_KEY == Settings.model_fields["SECRET_KEY"].default:
                logger.warning("⚠️ SECRET_KEY is the development default; sessions can be forged")
            yield
        finally:
            await db.dispose()
            logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Authentication", "description": "Registration, login and sessions"},
            {"name": "incomes", "description": "Monthly income records and locking"},
            {"name": "dashboard", "description": "Aggregated income, expenses and savings"},
        ],
    )
    app.state.settings = settings

    # CORS Configuration
    origins = [
        settings.FRONTEND_URL,
        "http://localhost:3000",  # Local development
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(dict.fromkeys(origins)),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(FinanceTrackerError)
    async def finance_tracker_error_handler(request: Request, exc: FinanceTrackerError):
        if isinstance(exc, StoreError):
            logger.warning(f"{request.method} {request.url.path} failed: {exc.code}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
            headers=headers,
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for better error responses"""
        if isinstance(exc, HTTPException):
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": exc.detail}
            )
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "code": "internal_error"}
        )

    # ------------------------------------------------------------
    # ROOT ENDPOINT
    # ------------------------------------------------------------
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information"""
        return {
            "message": f"{settings.APP_NAME} is running!",
            "version": settings.VERSION
        }

    # ------------------------------------------------------------
    # HEALTH CHECK ENDPOINT
    # ------------------------------------------------------------
    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint"""
        try:
            await request.app.state.db.ping()
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "version": settings.VERSION},
            )
        return {
            "status": "healthy",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT
        }

    # ------------------------------------------------------------
    # BUSINESS LOGIC ROUTES
    # ------------------------------------------------------------
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=False)
