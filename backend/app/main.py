"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, SessionLocal, engine

# Import routers
from app.routers import auth, events, attendees, users, categories
from app.services import category_service

# Import all models so Base.metadata knows about them
from app.models.user import User                     # noqa: F401
from app.models.category import Category             # noqa: F401
from app.models.event import Event                   # noqa: F401
from app.models.attendee import EventAttendee        # noqa: F401
from app.models.report import Report                 # noqa: F401
from app.models.event_mutation import EventMutation  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Happy Tolosa",
    description="Discover, join and organize local events in Toulouse",
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

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(attendees.router, prefix="/api/events", tags=["Attendance"])
app.include_router(users.router, prefix="/api/user", tags=["User"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])


@app.on_event("startup")
def on_startup():
    """Create tables and seed categories on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            category_service.seed_default_categories(db)
        finally:
            db.close()
        logger.info("SQLite schema ready at %s", settings.DATABASE_URL)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
