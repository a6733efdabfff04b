"""API route modules."""
from api.routes import mistakes, quiz, sources

__all__ = ["mistakes", "quiz", "sources"]
