"""SQLite-backed key-value store."""
from sqlalchemy.orm import Session as DbSession, sessionmaker

from api.database import SessionLocal
from api.models.db.kv_entry import KeyValueEntry


class SqlKeyValueStore:
    """KeyValueStore over the kv_entries table; each set overwrites the whole value."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def get(self, key: str) -> str | None:
        db: DbSession = self.session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            return entry.value if entry else None
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db: DbSession = self.session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
