"""SQLite key-value slot via SQLAlchemy: the todo list stored as one JSON row."""
import datetime
import json
import logging
import os
from typing import List, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from .storage import STORAGE_KEY

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class KeyValue(Base):
    __tablename__ = "kv_store"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False, default="[]")
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)


def _ensure_sqlite_dir(url: str):
    prefix = "sqlite:///"
    if url.startswith(prefix) and url != "sqlite:///:memory:":
        path = url[len(prefix):]
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)


class SqliteStorage:
    """Whole-list read/write against a single kv_store row."""

    def __init__(self, url: str, key: str = STORAGE_KEY):
        _ensure_sqlite_dir(url)
        self.key = key
        self.engine = create_engine(url, echo=False)
        self.session_factory = sessionmaker(self.engine, expire_on_commit=False)
        Base.metadata.create_all(self.engine)
        logger.info(f"Database initialized at {url}")

    def load(self) -> Optional[List[dict]]:
        with self.session_factory() as db:
            row = db.execute(select(KeyValue).where(KeyValue.key == self.key)).scalar_one_or_none()
            if row is None:
                return None
            return json.loads(row.value)

    def save(self, items: List[dict]):
        try:
            with self.session_factory() as db:
                row = db.get(KeyValue, self.key)
                payload = json.dumps(items, ensure_ascii=False)
                if row is None:
                    db.add(KeyValue(key=self.key, value=payload))
                else:
                    row.value = payload
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save todos to database: {e}")
