"""Application configuration and constants."""
import os
from pathlib import Path


def _parse_int_env(name: str, default: int | None) -> int | None:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse comma separated values from environment variable."""
    raw = os.environ.get(name)
    if not raw:
        return default
    values = tuple(item.strip() for item in raw.split(",") if item.strip())
    return values or default


# Directories
DATA_DIR = Path(os.environ.get("QUIZ_DATA_DIR", Path.cwd() / "data"))
DATA_DIR.mkdir(parents=True, exist_ok=True)

# Database (key-value store for the mistake set)
DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DATA_DIR / 'quiz.db'}")

# Question source loaded on startup (path or http(s) URL), optional
QUIZ_SOURCE = os.environ.get("QUIZ_SOURCE") or None
SOURCE_TIMEOUT_SECONDS = _parse_int_env("SOURCE_TIMEOUT_SECONDS", 30)

# Parsing
ANSWER_MARKERS = _parse_list_env("ANSWER_MARKERS", ("答案", "Answer", "Ans"))

# Session
QUIZ_RANDOM_SEED = _parse_int_env("QUIZ_RANDOM_SEED", None)
MISTAKES_KEY = os.environ.get("MISTAKES_KEY", "quiz_mistakes")

# Uploads
UPLOAD_MAX_SIZE_BYTES = 5 * 1024 * 1024  # 5 MB
UPLOAD_ALLOWED_EXTENSIONS = {".txt", ".json", ".docx"}
