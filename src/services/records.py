"""
Standings lookup rebuilt at the start of every ingestion cycle.
"""

import logging
from typing import Any, Dict

from schemas import TeamRecord

logger = logging.getLogger(__name__)


def default_text(value: Any) -> str:
    """NHL localised fields come as {"default": "..."}; plain strings pass through."""
    if isinstance(value, dict):
        return value.get('default', '') or ''
    return str(value) if value else ''


def format_record(wins: int, losses: int, ot_losses: int) -> str:
    """Format a W-L-OTL record, e.g. ``12-5-2``."""
    return f"{wins}-{losses}-{ot_losses}"


def build_record_index(collector) -> Dict[str, TeamRecord]:
    """
    Build a team abbreviation -> record lookup from one standings fetch.

    Upstream errors are not caught: a cycle must not run on stale records.

    Args:
        collector: Collector exposing ``fetch_standings()``

    Returns:
        Fresh mapping, replacing whatever the previous cycle built
    """
    records: Dict[str, TeamRecord] = {}

    for standing in collector.fetch_standings():
        abbrev = default_text(standing.get('teamAbbrev'))
        if not abbrev:
            logger.debug(f"Skipping standing without abbreviation: {standing}")
            continue

        records[abbrev] = TeamRecord(
            record_string=format_record(
                standing.get('wins') or 0,
                standing.get('losses') or 0,
                standing.get('otLosses') or 0,
            ),
            raw=standing,
        )

    logger.info(f"Fetched records for {len(records)} teams")
    return records


def team_display_name(abbrev: str, record: TeamRecord) -> str:
    """Team name from the standing entry, falling back to the abbreviation."""
    return (
        default_text(record.raw.get('teamName'))
        or default_text(record.raw.get('teamAbbrev'))
        or abbrev
    )
