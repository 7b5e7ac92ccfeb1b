"""Core package for the branching fiction editor."""

from .access import ADMIN_PREFIX, AccessPolicy, Identity, SessionIdentity
from .dialogue_tree import (
    ROOT_PARENT,
    DialogueChoice,
    DialogueNode,
    DialogueTree,
    NodeNotFoundError,
)
from .editor import GameEditor
from .game_collection import (
    GameCollection,
    GameEntry,
    GameExistsError,
    GameNotFoundError,
)
from .navigator import (
    CommandKind,
    EditCommand,
    MalformedCommandError,
    TreeNavigator,
    parse_command,
)
from .persistence import (
    CollectionRecord,
    CollectionStore,
    FileCollectionStore,
    InMemoryCollectionStore,
    StorageError,
    Visibility,
)
from .player import GamePlayer
from .presentation import ConsolePresenter, Presenter
from .settings import EditorSettings

__all__ = [
    "ROOT_PARENT",
    "DialogueChoice",
    "DialogueNode",
    "DialogueTree",
    "NodeNotFoundError",
    "GameCollection",
    "GameEntry",
    "GameExistsError",
    "GameNotFoundError",
    "Visibility",
    "ADMIN_PREFIX",
    "AccessPolicy",
    "Identity",
    "SessionIdentity",
    "CommandKind",
    "EditCommand",
    "MalformedCommandError",
    "TreeNavigator",
    "parse_command",
    "Presenter",
    "ConsolePresenter",
    "CollectionRecord",
    "CollectionStore",
    "FileCollectionStore",
    "InMemoryCollectionStore",
    "StorageError",
    "GameEditor",
    "GamePlayer",
    "EditorSettings",
]
