"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .stats import UserStats, OutcomeEvent, InvalidOutcomeError
from .results import ErrorKind, success_result, failure_result

__all__ = [
    'UserStats', 'OutcomeEvent', 'InvalidOutcomeError',
    'ErrorKind', 'success_result', 'failure_result'
]
