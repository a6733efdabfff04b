"""Main FastAPI application with modularized routes."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import QUIZ_SOURCE
from api.database import init_db
from api.routes import mistakes, quiz, sources
from api.services.quiz_service import get_controller
from core.logging_setup import setup_console_logging
from errors import QuizError

setup_console_logging()
log = logging.getLogger(__name__)

app = FastAPI(title="MCQ Revision API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Create the store table and load the configured question source."""
    init_db()
    if not QUIZ_SOURCE:
        return
    try:
        get_controller().load_location(QUIZ_SOURCE)
    except QuizError as exc:
        # no session starts; the client sees the idle view and may upload
        log.warning("Could not load questions from %s: %s", QUIZ_SOURCE, exc)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(sources.router)
app.include_router(quiz.router)
app.include_router(mistakes.router)
