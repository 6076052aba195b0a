"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from yup_sms.api.middleware import RequestContextMiddleware
from yup_sms.api.routes import api_router
from yup_sms.logging_config import setup_logging
from yup_sms.persistence.database import Base, engine
from yup_sms.persistence.models import *  # noqa: F401, F403
from yup_sms.settings import settings

# Setup logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup: Alembic owns the production schema; create tables for local SQLite
    if settings.environment != "production":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown
    await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="YUP.RSVP SMS API",
    description="SMS opt-in/opt-out compliance and notifications for YUP.RSVP",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

# Include API routes
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
