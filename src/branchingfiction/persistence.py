"""Typed records and stores used to persist a game collection."""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .dialogue_tree import DialogueChoice, DialogueNode, DialogueTree

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class StorageError(RuntimeError):
    """Raised when the collection cannot be read from or written to storage."""


class Visibility(str, Enum):
    """Partition a game is listed under."""

    PUBLIC = "public"
    PRIVATE = "private"

    def flipped(self) -> "Visibility":
        return Visibility.PRIVATE if self is Visibility.PUBLIC else Visibility.PUBLIC


class ChoiceRecord(BaseModel):
    """Stored form of a labelled choice."""

    label: str = Field(..., description="Text shown to the player for the choice.")
    target: int = Field(..., ge=0, description="Dialogue id the choice leads to.")

    @field_validator("label")
    @classmethod
    def _normalise_label(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Choice labels must be non-empty strings.")
        return trimmed


class DialogueRecord(BaseModel):
    """Stored form of a single dialogue node."""

    id: int = Field(..., ge=0)
    description: str = " "
    text: str = ""
    choices: list[ChoiceRecord] = Field(default_factory=list)


class TreeRecord(BaseModel):
    """Stored form of a dialogue tree, allocator included."""

    root_id: int = Field(..., ge=0)
    next_id: int = Field(..., ge=1)
    dialogues: list[DialogueRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_structure(self) -> "TreeRecord":
        self.to_tree()
        return self

    @classmethod
    def capture(cls, tree: DialogueTree) -> "TreeRecord":
        return cls(
            root_id=tree.root_id,
            next_id=tree.next_id,
            dialogues=[
                DialogueRecord(
                    id=node.id,
                    description=node.description,
                    text=node.text,
                    choices=[
                        ChoiceRecord(label=choice.label, target=choice.target)
                        for choice in node.choices
                    ],
                )
                for node in tree
            ],
        )

    def to_tree(self) -> DialogueTree:
        """Build a fresh :class:`DialogueTree` from this record.

        Raises:
            ValueError: If the stored dialogues do not form a valid tree.
        """

        nodes = [
            DialogueNode(
                id=dialogue.id,
                text=dialogue.text,
                description=dialogue.description,
                choices=[
                    DialogueChoice(choice.label, choice.target)
                    for choice in dialogue.choices
                ],
            )
            for dialogue in self.dialogues
        ]
        return DialogueTree.from_nodes(
            nodes, root_id=self.root_id, next_id=self.next_id
        )


class GameRecord(BaseModel):
    """Stored form of one named game."""

    name: str
    author: str
    visibility: Visibility
    tree: TreeRecord

    @field_validator("name", "author")
    @classmethod
    def _normalise_identifier(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Game names and authors must be non-empty strings.")
        return trimmed


class CollectionRecord(BaseModel):
    """Top-level document written to the data file."""

    version: int = SCHEMA_VERSION
    games: list[GameRecord] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: int) -> int:
        if value != SCHEMA_VERSION:
            raise ValueError(f"Unsupported collection schema version: {value}")
        return value

    @model_validator(mode="after")
    def _ensure_unique_names(self) -> "CollectionRecord":
        seen: set[str] = set()
        for game in self.games:
            if game.name in seen:
                raise ValueError(f"Duplicate game name: {game.name}")
            seen.add(game.name)
        return self


class CollectionStore(ABC):
    """Interface describing how a whole collection is persisted."""

    @abstractmethod
    def load(self) -> CollectionRecord:
        """Return the stored collection, or an empty one when nothing is stored.

        Raises:
            StorageError: If stored data exists but cannot be read.
        """

    @abstractmethod
    def save(self, record: CollectionRecord) -> None:
        """Replace the stored collection with ``record``.

        Raises:
            StorageError: If the collection could not be written.
        """


class InMemoryCollectionStore(CollectionStore):
    """Keep the serialised collection in local process memory."""

    def __init__(self, payload: str | None = None) -> None:
        self._payload = payload

    @property
    def payload(self) -> str | None:
        return self._payload

    def load(self) -> CollectionRecord:
        if self._payload is None:
            return CollectionRecord()
        try:
            return CollectionRecord.model_validate_json(self._payload)
        except ValidationError as exc:
            raise StorageError(f"Stored collection is invalid: {exc}") from exc

    def save(self, record: CollectionRecord) -> None:
        self._payload = record.model_dump_json()


class FileCollectionStore(CollectionStore):
    """Persist the collection as a JSON document at an explicit path."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> CollectionRecord:
        if not self.path.exists():
            logger.info("No collection at %s; starting empty", self.path)
            return CollectionRecord()

        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Failed to read '{self.path}': {exc}") from exc

        try:
            record = CollectionRecord.model_validate_json(raw)
        except ValidationError as exc:
            raise StorageError(
                f"Collection file '{self.path}' is invalid: {exc}"
            ) from exc

        logger.debug("Loaded %d game(s) from %s", len(record.games), self.path)
        return record

    def save(self, record: CollectionRecord) -> None:
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                delete=False,
                dir=self.path.parent,
                prefix=self.path.name,
                suffix=".tmp",
                encoding="utf-8",
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
                tmp_file.write(record.model_dump_json(indent=2))
                tmp_file.write("\n")
            os.replace(str(tmp_path), str(self.path))
        except OSError as exc:
            if tmp_path is not None:
                try:
                    tmp_path.unlink()
                except OSError:
                    pass
            raise StorageError(f"Failed to write '{self.path}': {exc}") from exc

        logger.debug("Saved %d game(s) to %s", len(record.games), self.path)


__all__ = [
    "SCHEMA_VERSION",
    "StorageError",
    "Visibility",
    "ChoiceRecord",
    "DialogueRecord",
    "TreeRecord",
    "GameRecord",
    "CollectionRecord",
    "CollectionStore",
    "InMemoryCollectionStore",
    "FileCollectionStore",
]
