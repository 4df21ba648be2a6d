"""
Services package for the NHL ingest service.
"""

from .history import HistoryAggregator
from .cycle_runner import CycleRunner
from .scheduler import Scheduler
from .store import GameStore

__all__ = [
    'HistoryAggregator',
    'CycleRunner',
    'Scheduler',
    'GameStore',
]
