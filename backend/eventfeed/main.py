"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventfeed.config import settings
from eventfeed.database import create_all
from eventfeed.errors import EngagementError
from eventfeed.logging_config import RequestIdContextManager, request_id_filter, setup_logging

# Import routers
from eventfeed.routers import calendar, events, favorites, recommendations, rsvps

# Import all models so Base.metadata knows about them
from eventfeed.models.event import Event            # noqa: F401
from eventfeed.models.favorite import UserFavorites  # noqa: F401
from eventfeed.models.rsvp import RSVP               # noqa: F401

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Event Feed",
    description="Event engagement and recommendation engine — favorites, RSVPs, calendar buckets and a ranked feed",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def tag_request(request: Request, call_next):
    """Stamp every log line emitted while serving a request with one short ID."""
    with RequestIdContextManager(request_id_filter) as ctx:
        response = await call_next(request)
        response.headers["X-Request-Id"] = ctx.request_id
        return response


@app.exception_handler(EngagementError)
async def engagement_error_handler(request: Request, exc: EngagementError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Register routers
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(favorites.router, prefix="/api/favorites", tags=["Favorites"])
app.include_router(rsvps.router, prefix="/api/rsvps", tags=["RSVPs"])
app.include_router(recommendations.router, prefix="/api/recommendations", tags=["Recommendations"])
app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])


@app.on_event("startup")
async def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        await create_all()


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
