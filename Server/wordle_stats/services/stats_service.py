"""
Stats Service

Business rules for per-user game statistics: creating a record, reading
it together with the user's nickname, and folding a game outcome into the
running totals.
"""

from dataclasses import replace
from typing import Any, Dict

from ..config.stats_rules import is_valid_attempt_count, MAX_ATTEMPTS
from ..models.results import ErrorKind, success_result, failure_result
from ..models.stats import UserStats, OutcomeEvent
from ..utils.stats_logger import stats_logger
from .nickname_resolver import NicknameResolver, NicknameLookupError
from .stats_store import (
    StatsStore, StatsStoreError, StatsAlreadyExistsError, StatsNotFoundError, StaleStatsError
)

CREATE_SUCCESS_MESSAGE = "Stats created successfully"
CREATE_FAILURE_MESSAGE = "Error: unable to create stats"
READ_SUCCESS_MESSAGE = "Stats retrieved successfully"
UPDATE_SUCCESS_MESSAGE = "Stats updated successfully"
STATS_NOT_FOUND_MESSAGE = "Stats not found"
NICKNAME_NOT_FOUND_MESSAGE = "Nickname not found"
STATS_LOOKUP_FAILED_MESSAGE = "Stats lookup failed"
NICKNAME_LOOKUP_FAILED_MESSAGE = "Nickname lookup failed"
UPDATE_FAILED_MESSAGE = "Stats update failed"


def apply_outcome(record: UserStats, event: OutcomeEvent) -> UserStats:
    """
    Return the record that results from recording one game outcome.

    The input record is left untouched. A loss never consults
    ``event.attempts``; a win must carry an attempt count in 1..MAX_ATTEMPTS.
    """
    if not event.won:
        return replace(
            record,
            total_games=record.total_games + 1,
            games_lost=record.games_lost + 1,
            wins_by_attempt=list(record.wins_by_attempt)
        )

    if not is_valid_attempt_count(event.attempts):
        raise ValueError(f"attempts must be between 1 and {MAX_ATTEMPTS} for a won game")

    buckets = list(record.wins_by_attempt)
    buckets[event.attempts - 1] += 1
    return replace(
        record,
        total_games=record.total_games + 1,
        games_won=record.games_won + 1,
        wins_by_attempt=buckets
    )


class StatsService:
    """
    Stats service for creating, reading and updating user statistics.

    The store and nickname resolver are injected so they can be swapped
    for in-memory implementations.
    """

    def __init__(self, store: StatsStore, nickname_resolver: NicknameResolver,
                 max_update_retries: int = 5):
        self.store = store
        self.nickname_resolver = nickname_resolver
        self.max_update_retries = max(1, int(max_update_retries))

    def create_stats(self, identity: str, total_games: int = 0) -> Dict[str, Any]:
        """
        Create a zeroed stats record for an identity.

        Args:
            identity: Authenticated user identity
            total_games: Initial game count; only 0 keeps the counters consistent

        Returns:
            Result dictionary with status and message
        """
        if isinstance(total_games, bool) or not isinstance(total_games, int) or total_games < 0:
            return failure_result(ErrorKind.INVALID_ARGUMENT, "totalgames must be a non-negative integer")
        if total_games != 0:
            return failure_result(
                ErrorKind.INVALID_ARGUMENT,
                "totalgames must be 0 for a new record without recorded wins or losses"
            )

        try:
            self.store.create(UserStats(identity=identity))
        except StatsAlreadyExistsError:
            return failure_result(ErrorKind.CONFLICT, CREATE_FAILURE_MESSAGE)
        except StatsStoreError as e:
            stats_logger.log_error(None, e, 'create_stats')
            return failure_result(ErrorKind.STORAGE_FAILURE, CREATE_FAILURE_MESSAGE)

        stats_logger.log_stats_event(identity, 'stats_created')
        return success_result(CREATE_SUCCESS_MESSAGE)

    def get_stats(self, identity: str) -> Dict[str, Any]:
        """
        Load an identity's stats and attach its nickname.

        Returns:
            Result dictionary; on success ``stats`` holds the flat view
        """
        try:
            record = self.store.find_by_identity(identity)
        except StatsStoreError as e:
            stats_logger.log_error(None, e, 'get_stats')
            return failure_result(ErrorKind.STORAGE_FAILURE, STATS_LOOKUP_FAILED_MESSAGE)

        if record is None:
            return failure_result(ErrorKind.STATS_NOT_FOUND, STATS_NOT_FOUND_MESSAGE)

        try:
            nickname = self.nickname_resolver.resolve_display_name(identity)
        except NicknameLookupError as e:
            stats_logger.log_error(None, e, 'get_stats')
            return failure_result(ErrorKind.STORAGE_FAILURE, NICKNAME_LOOKUP_FAILED_MESSAGE)

        if not nickname:
            return failure_result(ErrorKind.NICKNAME_NOT_FOUND, NICKNAME_NOT_FOUND_MESSAGE)

        view = record.to_view()
        view['nickname'] = nickname
        return success_result(READ_SUCCESS_MESSAGE, stats=view)

    def update_stats(self, identity: str, event: OutcomeEvent) -> Dict[str, Any]:
        """
        Record one game outcome for an identity.

        The record is loaded, updated and written back with a version check.
        If another writer got there first the cycle is repeated against the
        fresh record, up to ``max_update_retries`` times.

        Returns:
            Result dictionary with status and message
        """
        if event.won and not is_valid_attempt_count(event.attempts):
            return failure_result(
                ErrorKind.INVALID_ARGUMENT,
                f"attempts must be between 1 and {MAX_ATTEMPTS} for a won game"
            )

        for attempt in range(1, self.max_update_retries + 1):
            try:
                record = self.store.find_by_identity(identity)
                if record is None:
                    return failure_result(ErrorKind.STATS_NOT_FOUND, STATS_NOT_FOUND_MESSAGE)

                updated = self.store.persist(apply_outcome(record, event))

            except StaleStatsError:
                stats_logger.log_stats_event(identity, 'update_retry', attempt=attempt)
                continue
            except StatsNotFoundError:
                return failure_result(ErrorKind.STATS_NOT_FOUND, STATS_NOT_FOUND_MESSAGE)
            except StatsStoreError as e:
                stats_logger.log_error(None, e, 'update_stats')
                return failure_result(ErrorKind.STORAGE_FAILURE, UPDATE_FAILED_MESSAGE)

            stats_logger.log_stats_event(
                identity, 'stats_updated',
                won=event.won, attempts=event.attempts,
                total_games=updated.total_games, version=updated.version
            )
            return success_result(UPDATE_SUCCESS_MESSAGE)

        return failure_result(
            ErrorKind.STORAGE_FAILURE,
            f"Stats update failed: concurrent modification after {self.max_update_retries} attempts"
        )
