"""
In-memory record types passed between the collector, the ingest cycle and the store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TeamSide:
    """One side (home or away) of a game as seen in a single fetch."""

    team_id: Optional[int]
    abbrev: str
    name: str
    score: int = 0
    logo: str = ""
    record: str = ""  # whole-season W-L-OTL from the standings fetch


@dataclass(frozen=True)
class GameSnapshot:
    """A game as returned by one schedule fetch. A later fetch replaces it."""

    game_id: str
    start_time: datetime
    status: str
    venue: str
    broadcasts: str
    home: TeamSide
    away: TeamSide
    period_descriptor: str = ""
    game_clock: str = ""
    winning_goal_scorer: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def to_record(self) -> Dict[str, Any]:
        """Flatten into the column layout of the games table."""
        return {
            'game_id': self.game_id,
            'start_time': self.start_time,
            'status': self.status,
            'venue': self.venue,
            'broadcasts': self.broadcasts,
            'winning_goal_scorer': self.winning_goal_scorer,
            'period_descriptor': self.period_descriptor,
            'game_clock': self.game_clock,
            'home_team_id': self.home.team_id,
            'home_team_name': self.home.name,
            'home_team_abbrev': self.home.abbrev,
            'home_score': self.home.score,
            'home_logo': self.home.logo,
            'home_record': self.home.record,
            'away_team_id': self.away.team_id,
            'away_team_name': self.away.name,
            'away_team_abbrev': self.away.abbrev,
            'away_score': self.away.score,
            'away_logo': self.away.logo,
            'away_record': self.away.record,
            'api_raw': self.raw or None,
        }


@dataclass(frozen=True)
class HistoryEntry:
    """A completed game from one team's point of view."""

    game_id: str
    date: datetime
    opponent: str  # "vs TOR" at home, "@ TOR" away
    opponent_logo: str
    score: str  # "mine-theirs"
    outcome: str  # W, L or T

    def to_dict(self) -> Dict[str, Any]:
        return {
            'game_id': self.game_id,
            'date': self.date.isoformat(),
            'opponent': self.opponent,
            'opponent_logo': self.opponent_logo,
            'score': self.score,
            'outcome': self.outcome,
        }


@dataclass(frozen=True)
class TeamRecord:
    """Standings summary for one team, rebuilt every cycle."""

    record_string: str
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass
class CycleResult:
    """Scheduling signals observed during one ingestion pass."""

    live_found: bool = False
    pending_found: bool = False
    next_start: Optional[datetime] = None
    games_saved: int = 0
    teams_saved: int = 0
