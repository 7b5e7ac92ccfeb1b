"""Identity and ownership rules deciding who may edit which game."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from .game_collection import GameCollection, GameEntry

ADMIN_PREFIX = "Admin_"


class Identity(ABC):
    """Source of the name of the user driving the current session."""

    @abstractmethod
    def current_user(self) -> str:
        """Return the identifier of the active user."""


class SessionIdentity(Identity):
    """Identity fixed for the lifetime of a console session."""

    def __init__(self, username: str) -> None:
        if not isinstance(username, str):
            raise TypeError(f"username must be a string, got {type(username)!r}")
        stripped = username.strip()
        if not stripped:
            raise ValueError("username must be a non-empty string")
        self._username = stripped

    def current_user(self) -> str:
        return self._username


@dataclass(frozen=True)
class AccessPolicy:
    """Pure predicates over a user name and a game's ownership.

    Administrators are recognised purely by the ``admin_prefix`` on their user
    name and bypass every ownership check.
    """

    admin_prefix: str = ADMIN_PREFIX

    def is_admin(self, user: str) -> bool:
        return bool(self.admin_prefix) and user.startswith(self.admin_prefix)

    def can_edit(self, user: str, game: GameEntry | None) -> bool:
        """Return ``True`` for admins and for the author of ``game``."""

        if game is None:
            return False
        return self.is_admin(user) or game.author == user

    def must_privatize_before_edit(self, user: str, game: GameEntry | None) -> bool:
        """Return ``True`` when a non-admin owner is about to edit a public game."""

        if game is None or self.is_admin(user):
            return False
        return game.author == user and game.is_public

    def can_delete(self, user: str) -> bool:
        return self.is_admin(user)

    def editable_games(self, user: str, collection: GameCollection) -> List[str]:
        """Return the names ``user`` may edit, private games first."""

        if self.is_admin(user):
            private = collection.list_private()
            public = collection.list_public()
        else:
            private = collection.list_private(user)
            public = collection.list_public_by_author(user)
        return sorted(private) + sorted(public)

    def playable_games(self, user: str, collection: GameCollection) -> List[str]:
        """Return every public game plus the private games ``user`` may see."""

        if self.is_admin(user):
            private = collection.list_private()
        else:
            private = collection.list_private(user)
        return sorted(collection.list_public()) + sorted(private)


__all__ = ["ADMIN_PREFIX", "AccessPolicy", "Identity", "SessionIdentity"]
