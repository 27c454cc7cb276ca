"""FastAPI application entry point."""

from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from citytwin.config import get_settings
from citytwin.engine.scoring import HealthScoreTracker
from citytwin.logging_config import setup_logging, get_logger
from citytwin.routers import ask, scores, simulate, layers, observability
from citytwin.services.sample_data import get_sample_data_dir

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting CityTwin API...")
    logger.info(f"Sample layers served from {get_sample_data_dir()}")
    yield
    # Shutdown
    logger.info("Shutting down CityTwin API...")


settings = get_settings()

app = FastAPI(
    title="CityTwin",
    description="Digital twin city prototype - layer statistics, health scores and what-if simulations",
    version="0.1.0",
    lifespan=lifespan,
)

# Health score baseline, shared by every request in this process
app.state.health_tracker = HealthScoreTracker()


# Request timing middleware
@app.middleware("http")
async def log_request_timing(request: Request, call_next):
    """Log the time taken for each API request."""
    start_time = time.time()

    logger.info(f"→ API_REQUEST | {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time

    status_emoji = "✓" if response.status_code < 400 else "✗"
    logger.info(
        f"{status_emoji} API_RESPONSE | {request.method} {request.url.path} | "
        f"status={response.status_code} | duration={duration:.3f}s"
    )

    return response

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(observability.router, prefix="/v1", tags=["Observability"])
app.include_router(ask.router, prefix="/v1", tags=["Assistant"])
app.include_router(scores.router, prefix="/v1", tags=["Scores"])
app.include_router(simulate.router, prefix="/v1", tags=["Simulation"])
app.include_router(layers.router, prefix="/v1", tags=["Layers"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "CityTwin",
        "version": "0.1.0",
        "description": "Digital twin city prototype",
        "environment": settings.app_env,
    }
