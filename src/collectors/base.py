"""
Abstract base class for upstream data collectors.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional
import logging
import time

import requests

from config import settings

logger = logging.getLogger(__name__)


class CollectorError(Exception):
    """Raised when the upstream API answers with a non-success status."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"Upstream request failed: {status_code} for {url}")
        self.url = url
        self.status_code = status_code


class BaseCollector(ABC):
    """Abstract base class for schedule/standings collectors."""

    def __init__(self, league: str, api_timeout: Optional[int] = None,
                 max_requests_per_minute: Optional[int] = None):
        """
        Initialize the collector.

        Args:
            league: League identifier
            api_timeout: Per-request timeout in seconds
            max_requests_per_minute: Request budget per rolling minute
        """
        self.league = league.upper()
        self.api_timeout = api_timeout if api_timeout is not None else settings.nhl_api_timeout
        self.max_requests_per_minute = (
            max_requests_per_minute if max_requests_per_minute is not None
            else settings.nhl_max_requests_per_minute
        )

        # Rate limiting tracking
        self.request_times: List[float] = []

    def _check_rate_limit(self):
        """Check and enforce rate limiting."""
        now = time.time()

        # Remove requests older than 1 minute
        self.request_times = [t for t in self.request_times if now - t < 60]

        if len(self.request_times) >= self.max_requests_per_minute:
            sleep_time = 60 - (now - self.request_times[0])
            if sleep_time > 0:
                logger.info(f"Rate limit reached for {self.league}, sleeping for {sleep_time:.1f}s")
                time.sleep(sleep_time)

        self.request_times.append(time.time())

    def _get(self, url: str) -> requests.Response:
        """
        Issue a rate-limited GET with the configured timeout.

        Raises:
            CollectorError: on any non-200 response
            requests.RequestException: on transport failures and timeouts
        """
        self._check_rate_limit()

        start_time = time.time()
        response = requests.get(url, timeout=self.api_timeout)
        response_time = int((time.time() - start_time) * 1000)

        if response.status_code == 200:
            logger.debug(f"GET {url} -> 200 in {response_time}ms")
            return response
        if response.status_code == 429:
            logger.warning(f"Rate limited by {self.league} API on {url}")
        raise CollectorError(url, response.status_code)

    def _get_json(self, url: str) -> Dict[str, Any]:
        return self._get(url).json()

    @abstractmethod
    def fetch_standings(self) -> List[Dict[str, Any]]:
        """
        Get the current league-wide standings.

        Returns:
            List of raw standing dictionaries, one per team
        """
        pass

    @abstractmethod
    def fetch_schedule(self, target_date: date) -> List[Dict[str, Any]]:
        """
        Get the games scheduled on a calendar date.

        Args:
            target_date: Date to get schedule for

        Returns:
            List of raw game dictionaries
        """
        pass
