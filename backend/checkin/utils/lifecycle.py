# /checkin/utils/lifecycle.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from checkin.config.settings import settings
from checkin.utils.logging import setup_logging
from checkin.services.flow_store import flow_store, seed_default_flow
from checkin.services.session_service import session_service

# This file manages the application's lifespan, handling startup tasks like
# logging setup and seeding the default flow, and shutdown tasks like
# closing live sessions.

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    setup_logging()

    logger.info("Application starting up...")

    if settings.default_owner_id:
        await seed_default_flow(flow_store, settings.default_owner_id)
    logger.info("Application startup complete. Ready to accept requests.")

    yield  # Application is now running

    logger.info("Application shutting down...")

    # Closed sessions drop any message still waiting on a typing delay
    for session_id in list(session_service.sessions):
        session_service.discard(session_id)
