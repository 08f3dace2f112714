"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from app.config import Settings, settings
from app.context import AppContext
from app.database import Base, engine
from app.errors import register_exception_handlers
from app.templating import build_templates

# Import routers
from app.routers import events, pages, responses, rsvps, venues

# Import all models so Base.metadata knows about them
from app.models.user import User      # noqa: F401
from app.models.venue import Venue    # noqa: F401
from app.models.event import Event    # noqa: F401
from app.models.rsvp import RSVP      # noqa: F401

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the application and its shared context."""
    app = FastAPI(
        title="RSVP Manager",
        description="Events, invite codes and guest responses",
        version="0.1.0",
    )
    context = AppContext(
        settings=app_settings,
        templates=build_templates(app_settings.DEFAULT_TIMEZONE),
    )
    app.state.context = context

    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.SESSION_SECRET,
        max_age=app_settings.SESSION_MAX_AGE,
        https_only=app_settings.tls_enabled,
        same_site="lax",
    )
    register_exception_handlers(app)

    # Register routers
    app.include_router(pages.router, tags=["Pages"])
    app.include_router(events.build_router(context), prefix="/events", tags=["Events"])
    app.include_router(rsvps.qr_router, prefix="/rsvps/qr", tags=["RSVPs"])
    app.include_router(rsvps.build_router(context), prefix="/rsvps", tags=["RSVPs"])
    app.include_router(venues.build_router(context), prefix="/venues", tags=["Venues"])
    app.include_router(responses.router, tags=["Responses"])

    @app.on_event("startup")
    def on_startup():
        """Create database tables on startup (for SQLite dev mode)."""
        if app_settings.DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        logger.info("RSVP Manager started (base URL '%s')", app_settings.APP_BASE_URL or "relative")

    @app.on_event("shutdown")
    def on_shutdown():
        engine.dispose()
        logger.info("RSVP Manager stopped")

    return app


app = create_app()
