"""Database models."""
from api.models.db.kv_entry import KeyValueEntry

__all__ = ["KeyValueEntry"]
