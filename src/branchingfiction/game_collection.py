"""Named games partitioned into public and private visibility."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Tuple

from .dialogue_tree import DialogueTree
from .persistence import (
    CollectionRecord,
    CollectionStore,
    GameRecord,
    StorageError,
    TreeRecord,
    Visibility,
)

logger = logging.getLogger(__name__)


class GameNotFoundError(KeyError):
    """Raised when no game with the requested name exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Game '{name}' does not exist")
        self.name = name


class GameExistsError(ValueError):
    """Raised when creating a game under a name that is already taken."""


def _validate_name(value: str, *, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string, got {type(value)!r}")
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{field_name} must be a non-empty string")
    return stripped


@dataclass
class GameEntry:
    """A single game together with its ownership and visibility."""

    name: str
    author: str
    visibility: Visibility
    tree: DialogueTree

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    @property
    def is_private(self) -> bool:
        return self.visibility is Visibility.PRIVATE


class GameCollection:
    """Own every game and the trees behind them.

    Game names are unique across both visibility partitions, so a single
    mapping backs the collection and each entry carries its own
    :class:`Visibility`. Nothing is written to storage until :meth:`save` is
    called.
    """

    def __init__(self, *, store: CollectionStore | None = None) -> None:
        self._games: Dict[str, GameEntry] = {}
        self._store = store

    @classmethod
    def load(cls, store: CollectionStore) -> "GameCollection":
        """Build a collection from ``store``.

        Unreadable storage is logged and replaced with an empty collection so a
        damaged data file never prevents the program from starting.
        """

        try:
            record = store.load()
        except StorageError:
            logger.exception("Could not load games; starting with an empty collection")
            return cls(store=store)
        return cls.from_record(record, store=store)

    @property
    def store(self) -> CollectionStore | None:
        return self._store

    @classmethod
    def from_record(
        cls, record: CollectionRecord, *, store: CollectionStore | None = None
    ) -> "GameCollection":
        collection = cls(store=store)
        for game in record.games:
            collection._games[game.name] = GameEntry(
                name=game.name,
                author=game.author,
                visibility=game.visibility,
                tree=game.tree.to_tree(),
            )
        return collection

    def to_record(self) -> CollectionRecord:
        return CollectionRecord(
            games=[
                GameRecord(
                    name=entry.name,
                    author=entry.author,
                    visibility=entry.visibility,
                    tree=TreeRecord.capture(entry.tree),
                )
                for entry in self
            ]
        )

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, name: object) -> bool:
        return name in self._games

    def __iter__(self) -> Iterator[GameEntry]:
        for name in sorted(self._games):
            yield self._games[name]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameCollection):
            return NotImplemented
        return self._games == other._games

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._games))

    def get(self, name: str) -> GameEntry:
        """Return the entry for ``name``.

        Raises:
            GameNotFoundError: If no game uses that name.
        """

        try:
            return self._games[name]
        except KeyError:
            raise GameNotFoundError(name) from None

    def create_game(
        self,
        name: str,
        author: str,
        root_text: str = "",
        *,
        visibility: Visibility = Visibility.PRIVATE,
    ) -> GameEntry:
        """Register a new game whose tree holds only a root dialogue.

        Raises:
            GameExistsError: If the name is blank or already used.
        """

        try:
            validated_name = _validate_name(name, field_name="game name")
        except ValueError as exc:
            raise GameExistsError(str(exc)) from exc
        validated_author = _validate_name(author, field_name="author")
        if validated_name in self._games:
            raise GameExistsError(f"Game '{validated_name}' already exists")

        entry = GameEntry(
            name=validated_name,
            author=validated_author,
            visibility=Visibility(visibility),
            tree=DialogueTree(root_text),
        )
        self._games[validated_name] = entry
        logger.info(
            "Created %s game '%s' for %s",
            entry.visibility.value,
            entry.name,
            entry.author,
        )
        return entry

    def list_private(self, author: str | None = None) -> set[str]:
        """Return private game names, optionally restricted to one author."""

        return self._names_where(Visibility.PRIVATE, author)

    def list_public(self) -> set[str]:
        return self._names_where(Visibility.PUBLIC, None)

    def list_public_by_author(self, author: str) -> set[str]:
        return self._names_where(Visibility.PUBLIC, author)

    def open(self, name: str) -> Tuple[int, DialogueTree]:
        """Return the root id and the tree of ``name``.

        Raises:
            GameNotFoundError: If no game uses that name.
        """

        tree = self.get(name).tree
        return tree.root_id, tree

    def change_visibility(self, name: str) -> Visibility:
        """Flip ``name`` between public and private and return the new state.

        Raises:
            GameNotFoundError: If no game uses that name.
        """

        entry = self.get(name)
        entry.visibility = entry.visibility.flipped()
        logger.info("Game '%s' is now %s", name, entry.visibility.value)
        return entry.visibility

    def delete_game(self, name: str) -> bool:
        """Remove ``name``; ``False`` signals that it did not exist."""

        if self._games.pop(name, None) is None:
            return False
        logger.info("Deleted game '%s'", name)
        return True

    def save(self) -> None:
        """Overwrite stored data with the whole collection.

        Raises:
            RuntimeError: If the collection has no attached store.
            StorageError: If the store could not write the collection.
        """

        if self._store is None:
            raise RuntimeError("This collection has no store to save to")
        self._store.save(self.to_record())
        logger.info("Saved %d game(s)", len(self._games))

    def _names_where(self, visibility: Visibility, author: str | None) -> set[str]:
        return {
            entry.name
            for entry in self._games.values()
            if entry.visibility is visibility
            and (author is None or entry.author == author)
        }


__all__ = [
    "GameCollection",
    "GameEntry",
    "GameExistsError",
    "GameNotFoundError",
    "Visibility",
]
