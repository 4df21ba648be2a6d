"""
Game state classification for NHL schedule entries.
"""

from typing import Optional

STATUS_SCHEDULED = 'Scheduled'
STATUS_LIVE = 'Live'
STATUS_FINAL = 'Final'

_FINAL_STATES = {'OFF', 'FINAL'}
_LIVE_STATES = {'LIVE', 'CRIT', 'CRITICAL'}


def classify_game_state(game_state: Optional[str]) -> str:
    """
    Map a raw NHL ``gameState`` code to Scheduled, Live or Final.

    Unknown codes (FUT, PRE, postponed, missing...) are treated as Scheduled.

    Args:
        game_state: Raw state code from the schedule API

    Returns:
        One of STATUS_SCHEDULED, STATUS_LIVE, STATUS_FINAL
    """
    code = (game_state or '').strip().upper()

    if code in _FINAL_STATES:
        return STATUS_FINAL
    if code in _LIVE_STATES:
        return STATUS_LIVE
    return STATUS_SCHEDULED
