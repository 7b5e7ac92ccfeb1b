"""Menu flow for creating and editing games in a collection."""

from __future__ import annotations

import logging
from typing import List

from .access import AccessPolicy, Identity
from .game_collection import GameCollection, GameExistsError, Visibility
from .navigator import DEFAULT_RENDER_LIMIT, TreeNavigator
from .persistence import StorageError
from .presentation import Presenter

logger = logging.getLogger(__name__)

CHANGE_STATE = "Change Game State"
EDIT_DIALOGUES = "Edit Game Dialogues"
EXIT_AND_SAVE = "Exit and Save"
DELETE_GAME = "Delete Game"


class GameEditor:
    """Drive one user's create and edit sessions against ``collection``.

    Saving happens only at session boundaries: after creating a game, on
    "Exit and Save", after a non-admin changes visibility, and after a
    deletion.
    """

    def __init__(
        self,
        collection: GameCollection,
        presenter: Presenter,
        identity: Identity,
        *,
        policy: AccessPolicy | None = None,
        render_limit: int = DEFAULT_RENDER_LIMIT,
    ) -> None:
        self._collection = collection
        self._presenter = presenter
        self._identity = identity
        self._policy = policy if policy is not None else AccessPolicy()
        self._render_limit = render_limit

    @property
    def user(self) -> str:
        return self._identity.current_user()

    def create_game(self) -> bool:
        """Ask for a name and opening dialogue and register a private game."""

        name, root_text = self._presenter.prompt_inputs(
            ["Game Name:", "First Dialogue:"], "Enter the details of the new game."
        )
        try:
            entry = self._collection.create_game(
                name, self.user, root_text, visibility=Visibility.PRIVATE
            )
        except GameExistsError as exc:
            self._presenter.display_text(f"Cannot create this game: {exc}")
            return False

        self._presenter.display_text(
            f"Created private game '{entry.name}'. Use Edit to add dialogues."
        )
        return self._save()

    def edit_game(self) -> bool:
        """Run the edit menu for a game picked by name.

        Returns ``False`` when the user may not edit the requested game.
        """

        self._presenter.display_list(
            self._policy.editable_games(self.user, self._collection),
            "This is the list of available games.",
        )
        name = self._presenter.prompt_inputs(
            ["Game Name:"], "Enter the name of the game you want to edit."
        )[0]
        if not self.verify_edit_right(name):
            return False

        self._edit_menu(name)
        return True

    def verify_edit_right(self, name: str) -> bool:
        """Check ownership of ``name``, making a public game private if needed."""

        entry = self._collection.get(name) if name in self._collection else None
        if not self._policy.can_edit(self.user, entry):
            self._presenter.display_text("You cannot edit this game!")
            return False

        if self._policy.must_privatize_before_edit(self.user, entry):
            self._presenter.display_text("Changing game to private to edit...")
            self._collection.change_visibility(name)
        return True

    def edit_dialogues(self, name: str) -> None:
        root_id, tree = self._collection.open(name)
        navigator = TreeNavigator(
            tree,
            self._presenter,
            start_id=root_id,
            render_limit=self._render_limit,
        )
        navigator.run()

    def _menu_choices(self) -> List[str]:
        choices = [CHANGE_STATE, EDIT_DIALOGUES, EXIT_AND_SAVE]
        if self._policy.can_delete(self.user):
            choices.append(DELETE_GAME)
        return choices

    def _edit_menu(self, name: str) -> None:
        choices = self._menu_choices()
        while True:
            selected = choices[self._presenter.choose(choices, "")]

            if selected == CHANGE_STATE:
                if self._change_state(name):
                    break
            elif selected == EDIT_DIALOGUES:
                self.edit_dialogues(name)
            elif selected == EXIT_AND_SAVE:
                self._save()
                break
            elif selected == DELETE_GAME:
                self._collection.delete_game(name)
                self._presenter.display_text(f"Deleted game '{name}'.")
                self._save()
                break

    def _change_state(self, name: str) -> bool:
        visibility = self._collection.change_visibility(name)
        self._presenter.display_text(
            f"Game state changed to {visibility.value.capitalize()}."
        )
        if self._policy.is_admin(self.user):
            return False
        self._save()
        return True

    def _save(self) -> bool:
        try:
            self._collection.save()
        except StorageError as exc:
            logger.error("Saving games failed: %s", exc)
            self._presenter.display_text(f"Could not save games: {exc}")
            return False
        return True


__all__ = [
    "CHANGE_STATE",
    "DELETE_GAME",
    "EDIT_DIALOGUES",
    "EXIT_AND_SAVE",
    "GameEditor",
]
