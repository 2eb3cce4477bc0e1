"""
Operation Result Models

Every stats operation reports its outcome as a plain dictionary so that
controllers can serialize it directly. Failures carry an ``error_kind``
that controllers map to an HTTP status.
"""

from enum import Enum
from typing import Any, Dict


class ErrorKind(Enum):
    """Failure categories reported by the stats service."""
    STATS_NOT_FOUND = "stats_not_found"
    NICKNAME_NOT_FOUND = "nickname_not_found"
    CONFLICT = "conflict"
    STORAGE_FAILURE = "storage_failure"
    INVALID_ARGUMENT = "invalid_argument"


def success_result(message: str, **extra: Any) -> Dict[str, Any]:
    return {"status": True, "message": message, **extra}


def failure_result(kind: ErrorKind, message: str) -> Dict[str, Any]:
    return {"status": False, "message": message, "error_kind": kind.value}
