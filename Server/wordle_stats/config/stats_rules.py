"""
Stats Rules Constants Module

Game rules that shape the statistics record. Kept apart from the
environment-driven application configuration because these values define
the data model and never change per deployment.
"""

from typing import Final, Tuple

MAX_ATTEMPTS: Final[int] = 6
"""
Maximum number of guess attempts allowed per game.
Also the number of buckets in the wins-by-attempt histogram.
"""

ATTEMPT_RANGE: Final[Tuple[int, ...]] = tuple(range(1, MAX_ATTEMPTS + 1))
"""Attempt counts a won game can report, in bucket order."""


def is_valid_attempt_count(attempts) -> bool:
    """
    Check whether a value can index the wins-by-attempt histogram.

    Booleans are rejected even though Python treats them as integers,
    since a JSON ``true`` is never a valid attempt count.
    """
    return (
        isinstance(attempts, int)
        and not isinstance(attempts, bool)
        and attempts in ATTEMPT_RANGE
    )


def bucket_field(attempts: int) -> str:
    """Document field name for the wins bucket of the given attempt count."""
    return f"won{attempts}"
