"""Cursor-driven editing session over a single dialogue tree."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from .dialogue_tree import ROOT_PARENT, DialogueTree
from .presentation import Presenter

logger = logging.getLogger(__name__)

DEFAULT_RENDER_LIMIT = 150

COMMAND_HELP = (
    "Enter r to return to the parent dialogue, "
    "v + id to view the dialogue with that id (e.g. v1), "
    "c + id to change a game dialogue, "
    "a + id to add a dialogue, d + id to delete a dialogue, "
    "and e to exit."
)
WRONG_INPUT_MESSAGE = "Wrong input."
ROOT_DELETE_MESSAGE = "You cannot delete the first dialogue of the game!"
MISSING_LABEL_MESSAGE = "A choice needs a label."

_TARGETED_COMMAND = re.compile(r"([vcad])([0-9]+)")


class CommandKind(str, Enum):
    """Every action an editing session understands."""

    VIEW = "v"
    RETURN = "r"
    CHANGE = "c"
    ADD = "a"
    DELETE = "d"
    EXIT = "e"

    @property
    def takes_target(self) -> bool:
        return self not in (CommandKind.RETURN, CommandKind.EXIT)


class MalformedCommandError(ValueError):
    """Raised for input that is not a command for the current tree."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"{reason}: {raw!r}")
        self.raw = raw
        self.reason = reason


@dataclass(frozen=True)
class EditCommand:
    """A parsed command, with ``target`` set exactly for targeted kinds."""

    kind: CommandKind
    target: int | None = None

    def __post_init__(self) -> None:
        if self.kind.takes_target and self.target is None:
            raise ValueError(f"{self.kind.name} commands require a target id")
        if not self.kind.takes_target and self.target is not None:
            raise ValueError(f"{self.kind.name} commands do not take a target id")


def parse_command(raw: str, tree: DialogueTree) -> EditCommand:
    """Turn ``raw`` into an :class:`EditCommand` valid for ``tree``.

    ``r`` and ``e`` must stand alone. ``v``, ``c``, ``a`` and ``d`` must be
    followed by a decimal id present in ``tree``. Surrounding whitespace is
    not stripped; presenters hand over input already trimmed.

    Raises:
        MalformedCommandError: If the text does not parse or names a
            dialogue that is not in the tree.
    """

    if not raw:
        raise MalformedCommandError(raw, "empty command")

    if raw in (CommandKind.RETURN.value, CommandKind.EXIT.value):
        return EditCommand(CommandKind(raw))

    match = _TARGETED_COMMAND.fullmatch(raw)
    if match is None:
        raise MalformedCommandError(raw, "unrecognised command")

    try:
        target = int(match.group(2))
    except ValueError as exc:
        raise MalformedCommandError(raw, "id out of range") from exc
    if not tree.id_exists(target):
        raise MalformedCommandError(raw, f"dialogue {target} does not exist")
    return EditCommand(CommandKind(match.group(1)), target)


class TreeNavigator:
    """Interpret editing commands relative to a cursor inside ``tree``.

    The navigator borrows the tree from its owning collection for the length of
    one session; persisting the result is left to the caller. The only state is
    the cursor. When a deletion removes the dialogue under the cursor, the
    cursor moves to the closest ancestor that survived.
    """

    def __init__(
        self,
        tree: DialogueTree,
        presenter: Presenter,
        *,
        start_id: int | None = None,
        render_limit: int = DEFAULT_RENDER_LIMIT,
    ) -> None:
        cursor = tree.root_id if start_id is None else start_id
        tree.get_node(cursor)
        if render_limit <= 0:
            raise ValueError("render_limit must be a positive integer")

        self._tree = tree
        self._presenter = presenter
        self._cursor = cursor
        self._render_limit = render_limit
        self._finished = False

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def finished(self) -> bool:
        return self._finished

    def outline(self) -> str:
        return self._tree.render_subtree(self._cursor, self._render_limit)

    def run(self) -> None:
        """Keep reading commands until the user exits."""

        while not self._finished:
            node = self._tree.get_node(self._cursor)
            outline = self.outline()
            self._presenter.display_text(
                f"Dialogue ID {self._cursor}: {node.text}", outline
            )
            raw = self._presenter.prompt_line(COMMAND_HELP, outline)
            self.handle(raw)

    def handle(self, raw: str) -> bool:
        """Apply one line of input; ``False`` once the session is over."""

        try:
            command = parse_command(raw, self._tree)
        except MalformedCommandError as exc:
            logger.debug("Rejected editing command: %s", exc)
            self._presenter.display_text(WRONG_INPUT_MESSAGE)
            return True
        return self.apply(command)

    def apply(self, command: EditCommand) -> bool:
        """Apply an already parsed command; ``False`` once the session is over."""

        kind = command.kind
        if kind is CommandKind.EXIT:
            self._finished = True
            return False

        if kind is CommandKind.RETURN:
            parent_id = self._tree.get_parent(self._cursor)
            if parent_id != ROOT_PARENT:
                self._cursor = parent_id
            return True

        target = command.target
        if target is None:
            raise ValueError(f"{kind.name} commands require a target id")
        if not self._tree.id_exists(target):
            self._presenter.display_text(WRONG_INPUT_MESSAGE)
            return True

        if kind is CommandKind.VIEW:
            self._cursor = target
        elif kind is CommandKind.CHANGE:
            self._change_text(target)
        elif kind is CommandKind.ADD:
            self._add_dialogue(target)
        elif kind is CommandKind.DELETE:
            self._delete_dialogue(target)
        return True

    def _change_text(self, target: int) -> None:
        new_text = self._presenter.prompt_line(
            "Enter the new dialogue: ", self.outline()
        )
        self._tree.set_text(target, new_text)

    def _add_dialogue(self, target: int) -> None:
        label, description, text = self._presenter.prompt_inputs(
            ["Choice:", "Description:", "Dialogue:"],
            f"Enter the new choice you want to add to the dialogue with id {target}.",
        )
        if not label.strip():
            self._presenter.display_text(MISSING_LABEL_MESSAGE)
            return
        new_id = self._tree.add_choice(target, label, description)
        if text.strip():
            self._tree.set_text(new_id, text)
        self._presenter.display_text(f"Added dialogue {new_id} under {target}.")

    def _delete_dialogue(self, target: int) -> None:
        fallback = self._tree.ancestors(self._cursor)

        if not self._tree.delete_node(target):
            self._presenter.display_text(ROOT_DELETE_MESSAGE)
            return

        if not self._tree.id_exists(self._cursor):
            self._cursor = next(
                (node_id for node_id in fallback if self._tree.id_exists(node_id)),
                self._tree.root_id,
            )
        self._presenter.display_text(f"Deleted dialogue {target}.")


__all__ = [
    "COMMAND_HELP",
    "DEFAULT_RENDER_LIMIT",
    "MISSING_LABEL_MESSAGE",
    "ROOT_DELETE_MESSAGE",
    "WRONG_INPUT_MESSAGE",
    "CommandKind",
    "EditCommand",
    "MalformedCommandError",
    "TreeNavigator",
    "parse_command",
]
