# backend/main.py
"""
Line Subscription Manager - Main API Entry Point
"""
from datetime import datetime, timezone
from fastapi import FastAPI, HTTPException
import uvicorn
from contextlib import asynccontextmanager

from config.settings import settings
from config.logging import setup_logging, get_logger
from config.database import init_database, cleanup_database, check_database_health
from core.middleware import register_middleware
from core.exceptions import custom_exception_handler
from api.v1.endpoints import auth, customers, dashboard, me


# Configure logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION}...")
    init_database()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    cleanup_database()


# Create FastAPI application
app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Mobile-data line subscriptions: customers, renewals and payments",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

register_middleware(app)

# Add exception handlers
app.add_exception_handler(HTTPException, custom_exception_handler)

# Include routers
app.include_router(
    auth.router,
    prefix=f"{settings.API_V1_STR}/auth",
    tags=["Authentication"]
)
app.include_router(
    customers.router,
    prefix=f"{settings.API_V1_STR}/customers",
    tags=["Customers"]
)
app.include_router(
    dashboard.router,
    prefix=f"{settings.API_V1_STR}/dashboard",
    tags=["Dashboard"]
)
app.include_router(
    me.router,
    prefix=f"{settings.API_V1_STR}/me",
    tags=["My Lines"]
)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": settings.VERSION,
        "status": "operational"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    database_ok = check_database_health()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else 4
    )
