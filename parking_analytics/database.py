"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL. The analytics engine only reads from it,
through the adapters in services/session_store.py.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from parking_analytics.config import settings

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,          # Auto-reconnect if DB connection drops
    pool_size=10,
    max_overflow=20,
    echo=False,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """Create slot and log tables if missing. Safe to call multiple times."""
    import parking_analytics.models  # noqa

    Base.metadata.create_all(bind=bind or engine)
