"""
Services Package

Contains all business logic and service classes.
"""

from .stats_store import (
    StatsStore, MongoStatsStore, InMemoryStatsStore,
    StatsStoreError, StatsAlreadyExistsError, StatsNotFoundError, StaleStatsError
)
from .nickname_resolver import (
    NicknameResolver, MongoNicknameResolver, StaticNicknameResolver, NicknameLookupError
)
from .stats_service import StatsService, apply_outcome
from .token_service import TokenService

__all__ = [
    'StatsStore', 'MongoStatsStore', 'InMemoryStatsStore',
    'StatsStoreError', 'StatsAlreadyExistsError', 'StatsNotFoundError', 'StaleStatsError',
    'NicknameResolver', 'MongoNicknameResolver', 'StaticNicknameResolver', 'NicknameLookupError',
    'StatsService', 'apply_outcome',
    'TokenService'
]
