"""
NHL data collector for the ingest service.
"""

from datetime import date
from typing import Any, Dict, List, Optional
import logging

import requests

from config import settings
from utils.logos import get_espn_logo_url, svg_data_uri
from .base import BaseCollector, CollectorError

logger = logging.getLogger(__name__)


class NHLCollector(BaseCollector):
    """NHL data collector using the NHL Web API."""

    def __init__(self, base_url: Optional[str] = None, logo_base_url: Optional[str] = None,
                 inline_svg_logos: Optional[bool] = None, **kwargs):
        super().__init__("NHL", **kwargs)
        self.base_url = (base_url or settings.nhl_api_base).rstrip('/')
        self.logo_base_url = (logo_base_url or settings.nhl_logo_base).rstrip('/')
        self.inline_svg_logos = settings.inline_svg_logos if inline_svg_logos is None else inline_svg_logos
        self._logo_cache: Dict[str, str] = {}  # abbrev -> data URI

    def fetch_standings(self) -> List[Dict[str, Any]]:
        """
        Get current NHL standings.

        Returns:
            Raw standing entries (teamAbbrev, teamName, wins, losses, otLosses, ...)
        """
        data = self._get_json(f"{self.base_url}/standings/now")
        standings = data.get('standings', [])
        logger.debug(f"Fetched {len(standings)} standing entries")
        return standings

    def fetch_schedule(self, target_date: date) -> List[Dict[str, Any]]:
        """
        Get NHL games for a single date.

        The schedule endpoint returns a whole game week; only the day matching
        ``target_date`` is kept.

        Args:
            target_date: Date to get schedule for

        Returns:
            List of raw game dictionaries, de-duplicated by game id
        """
        date_str = target_date.strftime('%Y-%m-%d')
        data = self._get_json(f"{self.base_url}/schedule/{date_str}")

        games = []
        seen_game_ids = set()
        for day in data.get('gameWeek', []):
            if day.get('date', '') != date_str:
                continue
            for game in day.get('games', []):
                game_id = str(game.get('id', ''))
                if game_id and game_id not in seen_game_ids:
                    seen_game_ids.add(game_id)
                    games.append(game)

        return games

    def get_team_logo(self, abbrev: str) -> str:
        """
        Get a logo reference for a team profile.

        Returns the NHL SVG asset as a data URI when inlining is enabled,
        otherwise (or when the download fails) the ESPN PNG URL.

        Args:
            abbrev: Team abbreviation

        Returns:
            Data URI or URL
        """
        if not self.inline_svg_logos:
            return get_espn_logo_url(abbrev)

        if abbrev in self._logo_cache:
            return self._logo_cache[abbrev]

        url = f"{self.logo_base_url}/{abbrev}_light.svg"
        try:
            response = self._get(url)
        except (requests.RequestException, CollectorError) as e:
            logger.warning(f"Failed to fetch SVG for {abbrev}, falling back to ESPN PNG: {e}")
            return get_espn_logo_url(abbrev)

        logo = svg_data_uri(response.content)
        self._logo_cache[abbrev] = logo
        return logo
