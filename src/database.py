"""
Database connection and session management.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from contextlib import contextmanager
from typing import Any, Dict, Generator
from urllib.parse import urlparse, quote, urlunparse

from config import settings


def _fix_database_url(url: str) -> str:
    """
    Fix DATABASE_URL by properly URL-encoding the password if needed.

    Args:
        url: Database URL string

    Returns:
        Fixed database URL with properly encoded password
    """
    try:
        parsed = urlparse(url)
        if parsed.password and any(c in parsed.password for c in '/=@:'):
            encoded_password = quote(parsed.password, safe='')
            netloc = f"{parsed.username}:{encoded_password}@{parsed.hostname}"
            if parsed.port:
                netloc += f":{parsed.port}"
            return urlunparse((
                parsed.scheme,
                netloc,
                parsed.path,
                parsed.params,
                parsed.query,
                parsed.fragment
            ))
        return url
    except ValueError:
        # Unparseable URL, let SQLAlchemy report it
        return url


def _engine_options() -> Dict[str, Any]:
    """Engine keyword arguments, bounding connect and statement time on PostgreSQL."""
    options: Dict[str, Any] = {'echo': False}
    if settings.is_postgres:
        options.update(
            pool_pre_ping=True,
            pool_recycle=300,
            connect_args={
                'connect_timeout': settings.db_timeout,
                'options': f"-c statement_timeout={settings.db_timeout * 1000}",
            },
        )
    return options


database_url = _fix_database_url(settings.database_url)

engine = create_engine(database_url, **_engine_options())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def create_tables():
    """
    Create all tables in the database.
    """
    # Register models on Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
