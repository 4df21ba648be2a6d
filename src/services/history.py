"""
Rolling per-team history of completed games.
"""

import logging
from typing import Dict, List

from schemas import GameSnapshot, HistoryEntry
from utils.status import STATUS_FINAL

logger = logging.getLogger(__name__)

HOME = 'home'
AWAY = 'away'


def determine_outcome(my_score: int, opp_score: int) -> str:
    if my_score > opp_score:
        return 'W'
    if my_score < opp_score:
        return 'L'
    return 'T'


def build_history_entry(game: GameSnapshot, side: str) -> HistoryEntry:
    """
    Derive one team's view of a final game.

    Args:
        game: Final game snapshot
        side: ``home`` or ``away``

    Returns:
        History entry with opponent, score string and outcome
    """
    is_home = side == HOME
    mine, theirs = (game.home, game.away) if is_home else (game.away, game.home)

    return HistoryEntry(
        game_id=game.game_id,
        date=game.start_time,
        opponent=f"vs {theirs.abbrev}" if is_home else f"@ {theirs.abbrev}",
        opponent_logo=theirs.logo,
        score=f"{mine.score}-{theirs.score}",
        outcome=determine_outcome(mine.score, theirs.score),
    )


class HistoryAggregator:
    """Owns the team -> completed games mapping for one ingest process."""

    def __init__(self):
        self._history: Dict[str, List[HistoryEntry]] = {}

    def upsert(self, team_id: str, entry: HistoryEntry):
        """
        Insert or replace a team's entry for a game.

        Re-polling the same day across cycles yields the same game again;
        keying on game id keeps the history free of duplicates and lets
        score corrections overwrite the earlier entry.
        """
        entries = self._history.setdefault(team_id, [])
        for i, existing in enumerate(entries):
            if existing.game_id == entry.game_id:
                entries[i] = entry
                return
        entries.append(entry)

    def record_final_game(self, game: GameSnapshot) -> bool:
        """
        Add a final game to both teams' histories.

        Returns:
            True if the game was recorded, False if it is not final
        """
        if game.status != STATUS_FINAL:
            return False

        self.upsert(game.home.abbrev, build_history_entry(game, HOME))
        self.upsert(game.away.abbrev, build_history_entry(game, AWAY))
        return True

    def top_n(self, team_id: str, n: int) -> List[HistoryEntry]:
        """
        Most recent entries for a team, newest first.

        Ties on date are broken by game id ascending. Unknown teams get an
        empty list.
        """
        entries = sorted(self._history.get(team_id, []), key=lambda e: e.game_id)
        entries.sort(key=lambda e: e.date, reverse=True)
        return entries[:max(n, 0)]

    def clear(self):
        logger.debug(f"Clearing history for {len(self._history)} teams")
        self._history = {}

    def teams(self) -> List[str]:
        return list(self._history.keys())

    def __contains__(self, team_id: str) -> bool:
        return team_id in self._history

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._history.values())
