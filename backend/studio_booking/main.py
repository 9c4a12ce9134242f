# backend/studio_booking/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .api.responses import domain_exception_handler
from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .core.exceptions import DomainException
from .database import Base, SessionLocal, engine
from .middleware.prometheus_middleware import PrometheusMiddleware
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import (
    admin as admin_v1,
    bookings as bookings_v1,
    favorites as favorites_v1,
    passes as passes_v1,
    schedule as schedule_v1,
    specials as specials_v1,
    streaks as streaks_v1,
)
from .schemas.main_responses import HealthResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}, studio timezone: {settings.studio_timezone}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    if settings.is_sqlite:
        # SQLite deployments have no migration step; make sure tables exist
        Base.metadata.create_all(bind=engine)

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")
    engine.dispose()


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

app.add_exception_handler(DomainException, domain_exception_handler)
app.add_middleware(PrometheusMiddleware)

api_v1 = APIRouter(prefix=settings.api_prefix)
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(passes_v1.router, prefix="/passes")
api_v1.include_router(schedule_v1.router, prefix="/schedule")
api_v1.include_router(favorites_v1.router, prefix="/favorites")
api_v1.include_router(streaks_v1.router, prefix="/streaks")
api_v1.include_router(specials_v1.router, prefix="/specials")
api_v1.include_router(admin_v1.router, prefix="/admin")
app.include_router(api_v1)


def _database_status() -> str:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return "ok"
    except SQLAlchemyError as e:
        logger.warning(f"Health check database probe failed: {str(e)}")
        return "unavailable"
    finally:
        db.close()


@app.get("/health", response_model=HealthResponse)
def health_check(response: Response) -> HealthResponse:
    database = _database_status()
    if database != "ok":
        response.status_code = 503
    response.headers["Cache-Control"] = "no-store"
    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        service=f"{BRAND_NAME.lower()}-api",
        version=API_VERSION,
        environment=settings.environment,
        database=database,
    )


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
