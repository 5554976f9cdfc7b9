import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import Database
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.route_guard import RouteGuardMiddleware
from app.api.endpoints import (
    auth,
    candidate_portal,
    candidates,
    dashboard,
    departments,
    health,
    interview_panel,
    positions,
    problems,
    settings as settings_endpoints,
    stacks,
    submissions,
)

# Configure logging
setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS, service=settings.PROJECT_NAME)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    The database handle is created here, stored on app.state and disposed on
    shutdown; request handlers reach it through app.core.database.get_db.
    """
    # Startup
    logger.info(f"Starting up {settings.PROJECT_NAME}...")
    database = Database(settings.DATABASE_URL)
    database.init()
    if settings.AUTO_CREATE_TABLES or database.is_sqlite:
        database.create_all()
        logger.info("Database tables created")
    app.state.database = database

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    database.close()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Technical interview administration: scheduling, timed coding tests and review",
    lifespan=lifespan
)

register_exception_handlers(app)

# Redirect page requests to the right login screen; API routes answer 401/403 themselves
app.add_middleware(RouteGuardMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(auth.router, prefix=settings.API_V1_STR)
app.include_router(dashboard.router, prefix=settings.API_V1_STR)
app.include_router(departments.router, prefix=settings.API_V1_STR)
app.include_router(positions.router, prefix=settings.API_V1_STR)
app.include_router(stacks.router, prefix=settings.API_V1_STR)
app.include_router(problems.router, prefix=settings.API_V1_STR)
app.include_router(candidates.router, prefix=settings.API_V1_STR)
app.include_router(interview_panel.router, prefix=settings.API_V1_STR)
app.include_router(settings_endpoints.router, prefix=settings.API_V1_STR)
app.include_router(submissions.router, prefix=settings.API_V1_STR)
app.include_router(candidate_portal.router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
