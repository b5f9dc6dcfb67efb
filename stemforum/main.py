"""
STEM Forum API - Main FastAPI Application
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import time

from stemforum.config import settings
from stemforum.api.routes import articles, comments, newsletter
from stemforum.services.database import DatabaseUnavailableError, db_manager
from stemforum.utils.rate_limit import FixedWindowRateLimiter, RateLimitMiddleware
from stemforum.utils.security import SECURITY_HEADERS, SecurityHeadersMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# Define lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # Connect eagerly when possible; requests retry lazily if this fails
    try:
        await db_manager.ensure_connected()
    except DatabaseUnavailableError as e:
        logger.warning(f"Database unavailable at startup, will retry on demand: {e}")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")
    db_manager.close()


# Create FastAPI application with lifespan
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Article views, likes, comments and newsletter sign-up for the STEM October magazine",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

rate_limiter = FixedWindowRateLimiter(
    limit=settings.RATE_LIMIT_MAX_REQUESTS,
    window=settings.RATE_LIMIT_WINDOW_SECONDS,
)

# Last added is outermost; security headers and CORS must wrap the rate limiter
app.add_middleware(
    RateLimitMiddleware,
    limiter=rate_limiter,
    trust_proxy=settings.TRUST_PROXY,
    enabled=settings.RATE_LIMIT_ENABLED,
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(404)
async def not_found_handler(request: Request, exc: Exception):
    """Unknown endpoints echo back what was asked for"""
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not found",
            "path": request.url.path,
            "method": request.method,
            "message": "The requested endpoint does not exist",
        },
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": "Something went wrong" if settings.is_production else str(exc),
        },
        # Runs outside the middleware stack
        headers=SECURITY_HEADERS,
    )


app.include_router(articles.router)
app.include_router(comments.router)
app.include_router(newsletter.router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API banner"""
    return {
        "message": settings.APP_NAME,
        "status": "running",
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Service and database status"""
    try:
        await db_manager.ensure_connected()
        database = "connected"
    except DatabaseUnavailableError:
        database = "disconnected"
    return {
        "status": "OK",
        "message": "Server is running",
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "stemforum.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=not settings.is_production,
    )
