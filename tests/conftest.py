"""Test configuration for the branching fiction editor."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from collections.abc import Iterable, Sequence
from typing import Any

import pytest

from branchingfiction import DialogueTree, GameCollection, InMemoryCollectionStore
from branchingfiction.presentation import Presenter


class ScriptedPresenter(Presenter):
    """Presenter that replays queued answers and records everything shown."""

    def __init__(
        self,
        lines: Iterable[str] = (),
        *,
        choices: Iterable[int] = (),
    ) -> None:
        self._lines = list(lines)
        self._choices = list(choices)
        self.shown: list[str] = []
        self.prompts: list[str] = []

    def queue_lines(self, *lines: str) -> None:
        self._lines.extend(lines)

    def queue_choices(self, *choices: int) -> None:
        self._choices.extend(choices)

    def display_list(self, items: Sequence[str], caption: str) -> None:
        self.shown.append(caption)
        self.shown.extend(items)

    def prompt_inputs(self, labels: Sequence[str], caption: str) -> list[str]:
        self.prompts.append(caption)
        return [self._next_line() for _ in labels]

    def display_text(self, text: str, context: str = "") -> None:
        self.shown.append(text)

    def prompt_line(self, caption: str, context: str = "") -> str:
        self.prompts.append(caption)
        return self._next_line()

    def choose(self, options: Sequence[str], caption: str = "") -> int:
        self.prompts.append(caption)
        if not self._choices:
            raise EOFError("ScriptedPresenter ran out of queued choices")
        choice = self._choices.pop(0)
        assert 0 <= choice < len(options), f"choice {choice} not in {options}"
        return choice

    def _next_line(self) -> str:
        if not self._lines:
            raise EOFError("ScriptedPresenter ran out of queued lines")
        return self._lines.pop(0)


@pytest.fixture()
def make_presenter() -> Any:
    """Factory fixture for presenters with canned answers."""

    def _factory(
        lines: Iterable[str] = (), *, choices: Iterable[int] = ()
    ) -> ScriptedPresenter:
        return ScriptedPresenter(lines, choices=choices)

    return _factory


@pytest.fixture()
def sample_tree() -> DialogueTree:
    """Root 0 with two children; child 1 has a grandchild 3."""

    tree = DialogueTree("Start")
    left = tree.add_choice(0, "go left", "")
    tree.add_choice(0, "go right", "")
    tree.add_choice(left, "climb", "a tall tree")
    tree.set_text(left, "A dark forest.")
    return tree


@pytest.fixture()
def collection() -> GameCollection:
    """Collection with public and private games from two authors."""

    games = GameCollection(store=InMemoryCollectionStore())
    games.create_game("Quest", "alice", "You wake up.")
    games.change_visibility("Quest")
    games.create_game("Diary", "alice", "Dear diary.")
    games.create_game("Heist", "bob", "The vault looms.")
    games.create_game("Arena", "bob", "Fight!")
    games.change_visibility("Arena")
    return games


__all__ = ["ScriptedPresenter", "make_presenter", "sample_tree", "collection"]
