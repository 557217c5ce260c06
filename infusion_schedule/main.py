"""Infusion Bag Schedule FastAPI Application."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from infusion_schedule import __version__
from infusion_schedule.config import settings
from infusion_schedule.logging_config import get_logger, setup_logging
from infusion_schedule.middleware import CorrelationIdMiddleware
from infusion_schedule.routers import health, schedule

setup_logging(
    log_format=settings.log_format,
    log_level=settings.log_level,
    service_name=settings.service_name,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(
        "Infusion schedule API started",
        enable_5_day_bags=settings.enable_5_day_bags,
        enable_6_day_bags=settings.enable_6_day_bags,
        clinic_timezone=settings.clinic_timezone,
    )
    yield
    logger.info("Infusion schedule API shutdown complete")


app = FastAPI(
    title="Infusion Bag Schedule API",
    description="Projects infusion bag change schedules, alerts and calendars",
    version=__version__,
    lifespan=lifespan,
)

# Middleware (order matters: first added = last executed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(health.router)
app.include_router(schedule.router)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint."""
    return {
        "name": "Infusion Bag Schedule API",
        "version": __version__,
        "docs": "/docs",
    }
