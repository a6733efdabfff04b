from __future__ import annotations
import logging
import os


def setup_console_logging(level: int | None = None) -> None:
    """
    Call once at app start. Prints logs to console.
    Level defaults to QUIZ_LOG_LEVEL (INFO when unset).
    """
    if level is None:
        level = logging.getLevelName(os.environ.get("QUIZ_LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if root.handlers:
        # already configured (avoid duplicates)
        root.setLevel(level)
        return

    root.setLevel(level)
    h = logging.StreamHandler()
    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    h.setFormatter(fmt)
    root.addHandler(h)
