"""Play a game by following its choices from the root dialogue."""

from __future__ import annotations

from typing import List

from .access import AccessPolicy, Identity
from .game_collection import GameCollection
from .presentation import Presenter

BACK_OPTION = "Back"
QUIT_OPTION = "Quit game"


class GamePlayer:
    """Walk a dialogue tree, one choice at a time."""

    def __init__(
        self,
        collection: GameCollection,
        presenter: Presenter,
        identity: Identity,
        *,
        policy: AccessPolicy | None = None,
    ) -> None:
        self._collection = collection
        self._presenter = presenter
        self._identity = identity
        self._policy = policy if policy is not None else AccessPolicy()

    def play_game(self) -> List[int]:
        """Let the user pick a game and play it.

        Returns the dialogue ids visited, in order; empty when the user backed
        out without picking a game.
        """

        names = self._policy.playable_games(
            self._identity.current_user(), self._collection
        )
        if not names:
            self._presenter.display_text("There are no games to play yet.")
            return []

        options = [*names, BACK_OPTION]
        index = self._presenter.choose(options, "Choose a game to play.")
        if index == len(names):
            return []
        return self.play(names[index])

    def play(self, name: str) -> List[int]:
        """Play ``name`` from its root until a dead end or the user quits."""

        root_id, tree = self._collection.open(name)
        visited = [root_id]
        node = tree.get_node(root_id)
        while True:
            self._presenter.display_text(node.text or "...")
            if not node.choices:
                self._presenter.display_text("The End.")
                return visited

            labels = [choice.label for choice in node.choices]
            index = self._presenter.choose([*labels, QUIT_OPTION])
            if index == len(labels):
                return visited

            node = tree.get_node(node.choices[index].target)
            visited.append(node.id)


__all__ = ["BACK_OPTION", "QUIT_OPTION", "GamePlayer"]
