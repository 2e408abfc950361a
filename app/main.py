from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import firebase_admin
from firebase_admin import credentials
from slowapi.errors import RateLimitExceeded
import os

from app.config import settings
from app.database import close_db, get_session_factory, init_db
from app.dependencies import build_event_router
from app.llm.client import AnswerEvaluator
from app.logging_config import configure_logging
from app.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from app.middleware.request_id import RequestIDMiddleware
from app.notifications import FcmTransport
from app.routers import chat, read_states, notifications, devices, evaluations
from app.services.cleanup import CleanupScheduler
from app.services.evaluation_service import AnswerEvaluationService
from app.utils.logger import get_logger

# Configure logging first
configure_logging()
logger = get_logger(__name__)


def init_firebase() -> firebase_admin.App:
    """Initialize the Firebase Admin SDK once per process, with explicit credentials when available."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    try:
        firebase_json_path = settings.FIREBASE_SERVICE_ACCOUNT_JSON
        if os.path.exists(firebase_json_path):
            cred = credentials.Certificate(firebase_json_path)
            firebase_app = firebase_admin.initialize_app(cred)
            logger.info("Initialized Firebase Admin with provided service account JSON")
        else:
            # Fallback to default if path missing (e.g., using Application Default Credentials in env)
            firebase_app = firebase_admin.initialize_app()
            logger.warning(f"FIREBASE_SERVICE_ACCOUNT_JSON not found at {firebase_json_path}. Initialized Firebase with default credentials.")
    except Exception as e:
        logger.exception(f"Failed to initialize Firebase Admin SDK: {e}")
        raise
    return firebase_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    firebase_app = init_firebase()

    await init_db()
    session_factory = get_session_factory()

    app.state.event_router = build_event_router(session_factory, FcmTransport(app=firebase_app))
    app.state.evaluation_service = AnswerEvaluationService(session_factory, AnswerEvaluator())

    cleanup = CleanupScheduler(session_factory)
    if settings.CLEANUP_ENABLED:
        cleanup.start()

    mode = "DEBUG" if settings.DEBUG else "PRODUCTION"
    logger.info(f"Qoomy notification API started in {mode} mode")
    try:
        yield
    finally:
        cleanup.stop()
        await close_db()
        logger.info("Qoomy notification API stopped")


# Conditional docs configuration
if settings.DEBUG:
    docs_config = {
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "openapi_url": "/openapi.json"
    }
else:
    docs_config = {
        "docs_url": None,
        "redoc_url": None,
        "openapi_url": None
    }

app = FastAPI(
    title="Qoomy Notification API",
    description="Unread badges and push notifications for Qoomy quiz rooms",
    version="1.0.0",
    lifespan=lifespan,
    **docs_config
)

# Set up rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add Request ID middleware first for proper request tracing
app.add_middleware(RequestIDMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat.router)
app.include_router(read_states.router)
app.include_router(notifications.router)
app.include_router(devices.router)
app.include_router(evaluations.router)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": "qoomy-notify-api"}
