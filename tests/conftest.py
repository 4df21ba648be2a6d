"""Pytest configuration and fixtures for all tests."""

import os

# Point settings at SQLite before any project module builds the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["INLINE_SVG_LOGOS"] = "false"

from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Dict, Generator, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
import models  # noqa: F401
from services.history import HistoryAggregator
from services.store import GameStore
from utils.logos import get_espn_logo_url


NOW = datetime(2024, 1, 10, 18, 0, tzinfo=timezone.utc)


# ============================================================================
# Raw upstream payload builders
# ============================================================================

def make_standing(abbrev: str, wins: int = 0, losses: int = 0, ot_losses: int = 0,
                  name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "teamAbbrev": {"default": abbrev},
        "teamName": {"default": name or f"{abbrev} Team"},
        "wins": wins,
        "losses": losses,
        "otLosses": ot_losses,
    }


def make_raw_game(game_id: int, start: str, state: str = "FUT",
                  home: str = "TOR", away: str = "MTL",
                  home_score: Optional[int] = None, away_score: Optional[int] = None,
                  **extra) -> Dict[str, Any]:
    home_team = {"id": 10, "abbrev": home, "placeName": {"default": f"{home} City"}}
    away_team = {"id": 8, "abbrev": away, "placeName": {"default": f"{away} City"}}
    if home_score is not None:
        home_team["score"] = home_score
    if away_score is not None:
        away_team["score"] = away_score

    game = {
        "id": game_id,
        "startTimeUTC": start,
        "gameState": state,
        "homeTeam": home_team,
        "awayTeam": away_team,
    }
    game.update(extra)
    return game


class FakeCollector:
    """In-memory stand-in for NHLCollector."""

    def __init__(self, standings: Optional[List[Dict[str, Any]]] = None,
                 schedules: Optional[Dict[date, Any]] = None):
        self.standings = standings if standings is not None else []
        self.schedules = schedules or {}
        self.requested_dates: List[date] = []

    def fetch_standings(self):
        if isinstance(self.standings, Exception):
            raise self.standings
        return self.standings

    def fetch_schedule(self, target_date: date):
        self.requested_dates.append(target_date)
        games = self.schedules.get(target_date, [])
        if isinstance(games, Exception):
            raise games
        return games

    def get_team_logo(self, abbrev: str) -> str:
        return get_espn_logo_url(abbrev)


class RecordingStore:
    """Store stand-in that keeps every batch it receives."""

    def __init__(self):
        self.games: List[Dict[str, Any]] = []
        self.teams: List[Dict[str, Any]] = []
        self.fail_games = False

    def upsert_games(self, records):
        if self.fail_games:
            raise RuntimeError("store unavailable")
        self.games.extend(records)
        return len(records)

    def upsert_teams(self, records):
        self.teams.extend(records)
        return len(records)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def history() -> HistoryAggregator:
    return HistoryAggregator()


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def session_factory():
    """Context-managed sessions over a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    SessionTest = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    @contextmanager
    def factory() -> Generator[Session, None, None]:
        db = SessionTest()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    yield factory
    engine.dispose()


@pytest.fixture
def game_store(session_factory) -> GameStore:
    return GameStore(session_factory=session_factory, batch_size=400)
