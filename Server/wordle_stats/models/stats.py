"""
Stats Data Models

Contains the per-user statistics record and the game outcome event.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

from ..config.stats_rules import MAX_ATTEMPTS, ATTEMPT_RANGE, bucket_field


class InvalidOutcomeError(ValueError):
    """Raised when an outcome payload cannot be turned into an OutcomeEvent."""


def _empty_buckets() -> List[int]:
    return [0] * MAX_ATTEMPTS


@dataclass
class UserStats:
    """
    Cumulative statistics for one user.

    ``wins_by_attempt[i]`` counts wins that took ``i + 1`` attempts.
    ``version`` is bumped by the store on every successful write and is
    used for compare-and-set updates.
    """
    identity: str
    total_games: int = 0
    games_won: int = 0
    games_lost: int = 0
    wins_by_attempt: List[int] = field(default_factory=_empty_buckets)
    version: int = 0

    def is_consistent(self) -> bool:
        """Check the counter invariants."""
        counters = [self.total_games, self.games_won, self.games_lost, *self.wins_by_attempt]
        return (
            len(self.wins_by_attempt) == MAX_ATTEMPTS
            and all(value >= 0 for value in counters)
            and self.games_won + self.games_lost == self.total_games
            and sum(self.wins_by_attempt) == self.games_won
        )

    def copy(self) -> 'UserStats':
        """Return a copy that shares no mutable state with this record."""
        return replace(self, wins_by_attempt=list(self.wins_by_attempt))

    def to_view(self) -> Dict[str, Any]:
        """Flat counter fields as exposed to clients (no version)."""
        view = {
            'email': self.identity,
            'totalgames': self.total_games,
            'gameswon': self.games_won,
            'gameslost': self.games_lost,
        }
        for attempts, wins in zip(ATTEMPT_RANGE, self.wins_by_attempt):
            view[bucket_field(attempts)] = wins
        return view

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the MongoDB document shape."""
        document = self.to_view()
        document['version'] = self.version
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> 'UserStats':
        """Build a record from a stored document; missing counters read as zero."""
        return cls(
            identity=document['email'],
            total_games=int(document.get('totalgames', 0)),
            games_won=int(document.get('gameswon', 0)),
            games_lost=int(document.get('gameslost', 0)),
            wins_by_attempt=[int(document.get(bucket_field(a), 0)) for a in ATTEMPT_RANGE],
            version=int(document.get('version', 0)),
        )


@dataclass(frozen=True)
class OutcomeEvent:
    """A single completed game: win/loss plus attempts consumed."""
    won: bool
    attempts: int

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> 'OutcomeEvent':
        """
        Parse a request body into an OutcomeEvent.

        Raises:
            InvalidOutcomeError: If ``won`` is not a boolean or ``attempts``
                is not an integer.
        """
        if not isinstance(payload, Mapping):
            raise InvalidOutcomeError("Request body is required")

        won = payload.get('won')
        attempts = payload.get('attempts')

        if not isinstance(won, bool):
            raise InvalidOutcomeError("'won' must be a boolean")
        if not isinstance(attempts, int) or isinstance(attempts, bool):
            raise InvalidOutcomeError("'attempts' must be an integer")

        return cls(won=won, attempts=attempts)
