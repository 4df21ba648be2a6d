"""
Upstream data collectors package.
"""

from .base import BaseCollector, CollectorError
from .nhl import NHLCollector

__all__ = [
    'BaseCollector',
    'CollectorError',
    'NHLCollector',
]
