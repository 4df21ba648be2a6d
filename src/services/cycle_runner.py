"""
One ingestion pass: standings, a window of schedule days, history and persistence.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from config import settings
from schemas import CycleResult, GameSnapshot, TeamRecord, TeamSide
from services.history import HistoryAggregator
from services.records import build_record_index, default_text, team_display_name
from utils.logos import get_espn_logo_url
from utils.status import classify_game_state, STATUS_LIVE, STATUS_SCHEDULED

logger = logging.getLogger(__name__)

DEFAULT_VENUE = "Venue TBD"


def dates_in_window(today: date, radius: int) -> List[date]:
    """Calendar dates from ``today - radius`` to ``today + radius`` inclusive."""
    return [today + timedelta(days=offset) for offset in range(-radius, radius + 1)]


def parse_start_time(value: Optional[str]) -> datetime:
    """
    Parse an ISO-8601 ``startTimeUTC`` value.

    Raises:
        ValueError: if the value is missing or malformed
    """
    if not value:
        raise ValueError("missing startTimeUTC")
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_period(period_descriptor: Optional[Dict[str, Any]]) -> str:
    """Normalise a period descriptor to P<n>, OT or SO."""
    if not period_descriptor:
        return ""
    period_type = period_descriptor.get('periodType')
    if period_type in ('OT', 'SO'):
        return period_type
    return f"P{period_descriptor.get('number', '')}"


def format_clock(clock: Optional[Dict[str, Any]]) -> str:
    if not clock:
        return ""
    if clock.get('inIntermission'):
        return "Intermission"
    return clock.get('timeRemaining') or ""


def format_broadcasts(broadcasts: Optional[List[Dict[str, Any]]]) -> str:
    return ", ".join(b.get('network', '') for b in broadcasts or [] if b.get('network'))


def build_team_side(raw_team: Dict[str, Any], records: Dict[str, TeamRecord]) -> TeamSide:
    abbrev = raw_team.get('abbrev', '')
    record = records.get(abbrev)
    return TeamSide(
        team_id=raw_team.get('id'),
        abbrev=abbrev,
        name=default_text(raw_team.get('placeName')),
        score=raw_team.get('score') or 0,
        logo=get_espn_logo_url(abbrev),
        record=record.record_string if record else "",
    )


def build_game_snapshot(raw_game: Dict[str, Any], records: Dict[str, TeamRecord]) -> GameSnapshot:
    """
    Convert a raw schedule game into a snapshot.

    Raises:
        ValueError: if the start time cannot be parsed
    """
    scorer = (raw_game.get('winningGoalScorer') or {}).get('lastName')

    return GameSnapshot(
        game_id=str(raw_game.get('id', '')),
        start_time=parse_start_time(raw_game.get('startTimeUTC')),
        status=classify_game_state(raw_game.get('gameState')),
        venue=default_text(raw_game.get('venue')) or DEFAULT_VENUE,
        broadcasts=format_broadcasts(raw_game.get('tvBroadcasts')),
        home=build_team_side(raw_game.get('homeTeam') or {}, records),
        away=build_team_side(raw_game.get('awayTeam') or {}, records),
        period_descriptor=format_period(raw_game.get('periodDescriptor')),
        game_clock=format_clock(raw_game.get('clock')),
        winning_goal_scorer=default_text(scorer) or None,
        raw=raw_game,
    )


class CycleRunner:
    """Runs one ingestion pass and reports the scheduling signals it saw."""

    def __init__(self, collector, store, history: HistoryAggregator, history_size: Optional[int] = None):
        """
        Args:
            collector: Upstream collector (fetch_standings, fetch_schedule, get_team_logo)
            store: Downstream store (upsert_games, upsert_teams)
            history: Aggregator owned by the caller, mutated in place
            history_size: Number of recent games attached to each team profile
        """
        self.collector = collector
        self.store = store
        self.history = history
        self.history_size = history_size if history_size is not None else settings.history_size

    def run(self, radius: int, now: Optional[datetime] = None) -> CycleResult:
        """
        Run one cycle over ``now``'s date +/- ``radius`` days.

        Standings and store failures propagate; a failing schedule day is skipped.

        Args:
            radius: Day-window radius (0 = today only)
            now: Current time (UTC, defaults to now)

        Returns:
            CycleResult with live/pending flags and the next future start
        """
        if now is None:
            now = datetime.now(timezone.utc)

        records = build_record_index(self.collector)
        result = self.ingest_games(radius, now, records)
        result.teams_saved = self.save_team_profiles(records)
        return result

    def ingest_games(self, radius: int, now: datetime, records: Dict[str, TeamRecord]) -> CycleResult:
        logger.info(f"Fetching schedule and saving games (range: +/- {radius} days)")

        result = CycleResult()
        games_to_save: List[Dict[str, Any]] = []

        for day in dates_in_window(now.date(), radius):
            try:
                raw_games = self.collector.fetch_schedule(day)
            except Exception as e:
                logger.warning(f"Failed to fetch schedule for {day}, skipping: {e}")
                continue

            for raw_game in raw_games:
                try:
                    game = build_game_snapshot(raw_game, records)
                except ValueError as e:
                    logger.warning(f"Skipping game {raw_game.get('id', 'unknown')}: {e}")
                    continue

                self._observe(game, now, result)
                games_to_save.append(game.to_record())
                self.history.record_final_game(game)

        if games_to_save:
            result.games_saved = self.store.upsert_games(games_to_save)
            logger.info(f"Updated {result.games_saved} games")

        return result

    def _observe(self, game: GameSnapshot, now: datetime, result: CycleResult):
        """Fold one game into the cycle's scheduling signals."""
        if game.status == STATUS_LIVE:
            result.live_found = True

        # The API still says "not started" but the clock says it should have
        if game.status == STATUS_SCHEDULED and game.start_time <= now:
            result.pending_found = True

        if game.start_time > now and (result.next_start is None or game.start_time < result.next_start):
            result.next_start = game.start_time

    def build_team_profiles(self, records: Dict[str, TeamRecord]) -> List[Dict[str, Any]]:
        profiles = []
        for abbrev, record in records.items():
            profiles.append({
                'team_id': abbrev,
                'name': team_display_name(abbrev, record),
                'record': record.record_string,
                'logo': self.collector.get_team_logo(abbrev),
                'last_5_games': [entry.to_dict() for entry in self.history.top_n(abbrev, self.history_size)],
            })
        return profiles

    def save_team_profiles(self, records: Dict[str, TeamRecord]) -> int:
        logger.info("Saving team profiles (with history)")
        profiles = self.build_team_profiles(records)
        if not profiles:
            return 0

        saved = self.store.upsert_teams(profiles)
        logger.info(f"Updated {saved} team profiles")
        return saved
