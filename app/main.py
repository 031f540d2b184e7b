"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import database
from app.routers import contributions, exchange_rates, goals
from app.utils.errors import request_validation_handler, unhandled_exception_handler

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await database.connect()
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="Savings Goal Tracker API",
    description="Track savings goals and contributions across USD and INR",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handling
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Include routers
app.include_router(goals.router)
app.include_router(contributions.router)
app.include_router(exchange_rates.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Savings Goal Tracker API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "storage": settings.storage_backend}


@app.get("/api/config")
async def client_config():
    """
    Client display settings.

    The placeholder rate is for showing approximate figures while the live
    rate loads; the dashboard never aggregates with it.
    """
    return {"displayPlaceholderRate": settings.display_placeholder_rate}
