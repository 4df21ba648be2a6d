"""
Utility modules for the NHL ingest service.
"""

from .adaptive_polling import AdaptivePollingManager, polling_state
from .logos import get_espn_logo_url, svg_data_uri
from .status import classify_game_state, STATUS_SCHEDULED, STATUS_LIVE, STATUS_FINAL

__all__ = [
    'AdaptivePollingManager',
    'polling_state',
    'get_espn_logo_url',
    'svg_data_uri',
    'classify_game_state',
    'STATUS_SCHEDULED',
    'STATUS_LIVE',
    'STATUS_FINAL',
]
