"""
SQLAlchemy models for the NHL ingest service.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from sqlalchemy.sql import func
from database import Base


class Game(Base):
    """One row per NHL game, upserted every time the game is fetched."""

    __tablename__ = "games"

    id = Column(Integer, primary_key=True, index=True)

    game_id = Column(String(20), nullable=False, unique=True, index=True)
    start_time = Column(DateTime(timezone=True), nullable=True, index=True)
    status = Column(String(20), nullable=False, index=True)  # Scheduled, Live, Final
    venue = Column(String(100), nullable=True)
    broadcasts = Column(String(255), nullable=True)
    winning_goal_scorer = Column(String(100), nullable=True)

    # Live fields
    period_descriptor = Column(String(10), nullable=True)  # P1, P2, P3, OT, SO
    game_clock = Column(String(20), nullable=True)

    # Home team
    home_team_id = Column(Integer, nullable=True)
    home_team_name = Column(String(100), nullable=True)
    home_team_abbrev = Column(String(10), nullable=False)
    home_score = Column(Integer, nullable=True)
    home_logo = Column(String(255), nullable=True)
    home_record = Column(String(20), nullable=True)

    # Away team
    away_team_id = Column(Integer, nullable=True)
    away_team_name = Column(String(100), nullable=True)
    away_team_abbrev = Column(String(10), nullable=False)
    away_score = Column(Integer, nullable=True)
    away_logo = Column(String(255), nullable=True)
    away_record = Column(String(20), nullable=True)

    api_raw = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Game(game_id={self.game_id}, {self.away_team_abbrev} @ {self.home_team_abbrev}, status={self.status})>"


class Team(Base):
    """Team profile: standings record, logo and most recent completed games."""

    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)

    team_id = Column(String(10), nullable=False, unique=True, index=True)  # abbreviation, e.g. TOR
    name = Column(String(100), nullable=True)
    record = Column(String(20), nullable=True)
    logo = Column(Text, nullable=True)  # URL or data URI
    last_5_games = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Team(team_id={self.team_id}, record={self.record})>"
