"""SQLAlchemy-backed record store for website audits."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Column, DateTime, Integer, JSON, String, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from utils.errors import PersistenceError
from .record_store import RecordStore

logger = logging.getLogger(__name__)

Base = declarative_base()

UPDATABLE_FIELDS = ("audit_results", "overall_score", "status")


def _utcnow():
    return datetime.now(timezone.utc)


class WebsiteAudit(Base):
    __tablename__ = "website_audits"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    website_url = Column(String(2048), nullable=False, index=True)
    social_url = Column(String(2048), nullable=True)
    email = Column(String(255), nullable=True)
    status = Column(String(32), nullable=False, default="processing", index=True)
    overall_score = Column(Integer, nullable=True)
    audit_results = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "website_url": self.website_url,
            "social_url": self.social_url,
            "email": self.email,
            "status": self.status,
            "overall_score": self.overall_score,
            "audit_results": self.audit_results or {},
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<WebsiteAudit(id={self.id}, url='{self.website_url}', status='{self.status}')>"


def normalize_database_url(db_url: str) -> str:
    """Strip stray quotes and map legacy ``postgres://`` to ``postgresql://``."""
    if not db_url:
        raise ValueError("DATABASE_URL is missing.")
    db_url = db_url.strip().strip('"').strip("'")
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)
    return db_url


class SQLRecordStore(RecordStore):
    """Stores audit records in the ``website_audits`` table."""

    def __init__(self, database_url: str, create_tables: bool = True):
        database_url = normalize_database_url(database_url)
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine = create_engine(
            database_url,
            pool_pre_ping=True,
            connect_args=connect_args,
            future=True,
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            future=True,
        )
        if create_tables:
            self.init_db()

    def init_db(self):
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error("Database initialization failed: %s", e)
            raise PersistenceError("init", str(e))

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        row = WebsiteAudit(
            website_url=record["website_url"],
            social_url=record.get("social_url"),
            email=record.get("email"),
            status=record.get("status", "processing"),
            overall_score=record.get("overall_score"),
            audit_results=record.get("audit_results") or {},
        )
        try:
            with self.SessionLocal() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return row.to_dict()
        except SQLAlchemyError as e:
            logger.error("Database insert error: %s", e)
            raise PersistenceError("insert", str(e))

    def update(self, record_id: str, fields: Dict[str, Any]) -> None:
        try:
            with self.SessionLocal() as session:
                row = session.get(WebsiteAudit, record_id)
                if row is None:
                    raise PersistenceError("update", f"No audit record with id {record_id}")
                for key in UPDATABLE_FIELDS:
                    if key in fields:
                        setattr(row, key, fields[key])
                session.commit()
        except SQLAlchemyError as e:
            logger.error("Database update error: %s", e)
            raise PersistenceError("update", str(e))

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            with self.SessionLocal() as session:
                row = session.get(WebsiteAudit, record_id)
                return row.to_dict() if row else None
        except SQLAlchemyError as e:
            logger.error("Database read error: %s", e)
            raise PersistenceError("get", str(e))

    def dispose(self):
        self.engine.dispose()
