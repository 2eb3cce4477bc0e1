"""
Nickname Resolver

Resolves the display name shown next to a user's stats. Nicknames belong
to the user accounts collection, not to the stats record.
"""

from abc import ABC, abstractmethod
from typing import Mapping, Optional

from pymongo.collection import Collection
from pymongo.errors import PyMongoError


class NicknameLookupError(Exception):
    """The user directory could not be queried."""


class NicknameResolver(ABC):
    """Display-name lookup interface consumed by the stats service."""

    @abstractmethod
    def resolve_display_name(self, identity: str) -> Optional[str]:
        """Return the display name for an identity, or None if it has none."""


class MongoNicknameResolver(NicknameResolver):
    """Reads ``nickname`` from the users collection, matched on ``email``."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def resolve_display_name(self, identity: str) -> Optional[str]:
        try:
            user = self.collection.find_one({"email": identity}, {"nickname": 1})
        except PyMongoError as e:
            raise NicknameLookupError(f"Nickname lookup failed: {e}") from e

        if not user:
            return None
        nickname = user.get("nickname")
        if not isinstance(nickname, str) or not nickname.strip():
            return None
        return nickname


class StaticNicknameResolver(NicknameResolver):
    """Dictionary-backed resolver for local runs and tests."""

    def __init__(self, nicknames: Optional[Mapping[str, str]] = None):
        self.nicknames = dict(nicknames or {})

    def resolve_display_name(self, identity: str) -> Optional[str]:
        nickname = self.nicknames.get(identity)
        if not nickname or not nickname.strip():
            return None
        return nickname
