"""
Persistence of games and team profiles.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, ContextManager, Dict, List, Optional, Type

from sqlalchemy.orm import Session

from config import settings
from database import get_db_session
from models import Game, Team

logger = logging.getLogger(__name__)


class GameStore:
    """Idempotent, merge-style upserts into the games and teams tables."""

    def __init__(self, session_factory: Optional[Callable[[], ContextManager[Session]]] = None,
                 batch_size: Optional[int] = None):
        """
        Args:
            session_factory: Context manager yielding a session that commits on exit
            batch_size: Max records written per transaction
        """
        self.session_factory = session_factory or get_db_session
        self.batch_size = batch_size or settings.write_batch_size

    def upsert_games(self, records: List[Dict[str, Any]]) -> int:
        """
        Insert or update games keyed by ``game_id``.

        Returns:
            Number of records written
        """
        return self._upsert_all(Game, 'game_id', records)

    def upsert_teams(self, records: List[Dict[str, Any]]) -> int:
        """
        Insert or update team profiles keyed by ``team_id``.

        Returns:
            Number of records written
        """
        return self._upsert_all(Team, 'team_id', records)

    def _upsert_all(self, model: Type, key: str, records: List[Dict[str, Any]]) -> int:
        written = 0
        for start in range(0, len(records), self.batch_size):
            chunk = records[start:start + self.batch_size]
            # One transaction per chunk; a failure rolls back the chunk and propagates
            with self.session_factory() as db:
                for record in chunk:
                    self._upsert(db, model, key, record)
            written += len(chunk)
            logger.debug(f"Wrote {len(chunk)} {model.__tablename__} rows")
        return written

    def _upsert(self, db: Session, model: Type, key: str, record: Dict[str, Any]):
        """
        Insert or update one row.

        Fields that are absent or None in ``record`` leave stored values untouched.
        """
        existing = db.query(model).filter(getattr(model, key) == record[key]).first()

        if existing:
            for field_name, value in record.items():
                if hasattr(existing, field_name) and value is not None:
                    setattr(existing, field_name, value)
            existing.updated_at = datetime.now(timezone.utc)
            return existing

        row = model(**{k: v for k, v in record.items() if v is not None and hasattr(model, k)})
        db.add(row)
        # Make the row visible to later lookups in the same chunk
        db.flush()
        return row
