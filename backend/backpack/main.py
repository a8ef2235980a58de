import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

# Import routers
from backpack.api.routes import admin, codes, health, register, tickets, visitors
from backpack.core.config import settings
from backpack.core.errors import BackpackError
from backpack.core.logging import setup_logging
from backpack.db.base import Base
from backpack.db.session import engine
from backpack.services.uploads import upload_manager

# Register tables on Base.metadata
import backpack.models  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    # Startup
    logger.info(f"🚀 Starting {settings.PROJECT_NAME}...")

    logger.info("📦 Creating database tables...")
    Base.metadata.create_all(bind=engine)

    # Test database connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful")
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        raise

    upload_manager.ensure_directory()
    logger.info(f"Uploads directory: {upload_manager.directory}")
    logger.info(f"Database: {settings.DATABASE_URL}")

    yield

    # Shutdown
    logger.info("👋 Shutting down...")


def _error_body(message: str) -> dict:
    return {"success": False, "error": message}


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(BackpackError)
    async def backpack_error_handler(request: Request, exc: BackpackError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Invalid request: {field} {first.get('msg', '')}".strip()
        else:
            message = "Invalid request."
        return JSONResponse(status_code=400, content=_error_body(message))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled app error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content=_error_body("Internal Server Error"))


def create_app() -> FastAPI:
    log_buffer = setup_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Referral codes for locals, ticket verification for visitors",
        version=settings.VERSION,
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.log_buffer = log_buffer
    app.state.start_time = datetime.now(timezone.utc).isoformat()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(register.router, prefix="/api", tags=["Locals"])
    app.include_router(visitors.router, prefix="/api", tags=["Visitors"])
    app.include_router(codes.router, prefix="/api", tags=["Referral Codes"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
    app.include_router(tickets.router, tags=["Tickets"])

    @app.get("/api")
    async def root():
        """Root endpoint with API information"""
        return {
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "operational",
            "docs": "/docs",
            "endpoints": {
                "health": "/api/health",
                "register_local": "/api/locals/register",
                "upload_ticket": "/api/visitors/upload",
                "validate_code": "/api/validate-code",
                "verifications": "/api/admin/verifications",
                "verify_action": "/api/admin/verify-action",
            },
        }

    return app


app = create_app()


def run():
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, reload=False)


if __name__ == "__main__":
    run()
