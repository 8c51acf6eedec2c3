"""
Video Ranker - Main FastAPI application.

Backend for a collaborative video-ranking tool: users create playlists,
contributors submit video links and participants score each video.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from ranker.config import settings
from ranker.database import init_db
from ranker.routes import users, playlists, videos, scores

# Configure logging (will be reconfigured with LOG_LEVEL setting during startup)
logging.basicConfig(
    level=logging.INFO,  # Default level before settings are fully loaded
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting Video Ranker application...")

    # Configure logging level from settings
    log_level = getattr(logging, settings.log_level)
    logging.getLogger().setLevel(log_level)
    logger.info(f"Log level set to: {settings.log_level}")

    await init_db()
    logger.info(f"Data directory: {settings.data_dir}")

    if not settings.allow_registration:
        logger.info("Registration is disabled; /api/users/add will return 403")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Application shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Video Ranker",
    description=(
        "Collaborative video ranking: playlists, submitted videos and 1-11 scores.\n\n"
        "Auth: Use the `Authorization: Bearer <token>` header for protected routes."
    ),
    version="1.0.0",
    lifespan=lifespan
)


# Bodies and path params FastAPI cannot parse are reported as 400
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report request validation failures as 400 with a readable message."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        problems.append(f"{field}: {error['msg']}" if field else error["msg"])
    message = "; ".join(problems) or "Invalid request"
    logger.info(f"Rejected request to {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message}
    )


# Register routes
app.include_router(users.router)
app.include_router(playlists.router)
app.include_router(videos.router)
app.include_router(scores.router)


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root():
    return "Why are you here?"


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ranker.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower()
    )
