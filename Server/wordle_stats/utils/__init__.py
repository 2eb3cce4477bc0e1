"""
Utilities Package

Contains decorators and the structured logger.
"""

from .decorators import require_auth
from .stats_logger import stats_logger

__all__ = ['require_auth', 'stats_logger']
