"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite for tests). All models are
auto-imported here so create_tables() creates every table in one call.
"""

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings

if settings.DATABASE_URL.startswith("sqlite"):
    # One shared connection so an in-memory database survives across sessions
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=settings.DB_ECHO,
    )
else:
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=settings.DB_ECHO,
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


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    import app.models  # noqa

    Base.metadata.create_all(bind=engine)


def drop_tables():
    """Drops every table. Used by the test suite."""
    import app.models  # noqa

    Base.metadata.drop_all(bind=engine)


@contextmanager
def atomic(db):
    """
    Run a block as one transaction on an existing session: commit when the
    block finishes, roll back and re-raise on any exception.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


LIKE_ESCAPE = "\\"


def contains_pattern(text) -> str:
    """ILIKE pattern for a literal substring; % and _ in the text match themselves."""
    text = (text or "").replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{text}%"
