"""Command-line entry point for the branching fiction editor."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from branchingfiction import (
    AccessPolicy,
    CollectionStore,
    ConsolePresenter,
    EditorSettings,
    FileCollectionStore,
    GameCollection,
    GameEditor,
    GamePlayer,
    Identity,
    InMemoryCollectionStore,
    Presenter,
    SessionIdentity,
)
from branchingfiction.navigator import DEFAULT_RENDER_LIMIT

logger = logging.getLogger(__name__)

PLAY = "Play a game"
CREATE = "Create a game"
EDIT = "Edit a game"
QUIT = "Quit"
MENU_OPTIONS = (PLAY, CREATE, EDIT, QUIT)


def run_cli(
    collection: GameCollection,
    presenter: Presenter,
    identity: Identity,
    *,
    policy: AccessPolicy | None = None,
    render_limit: int = DEFAULT_RENDER_LIMIT,
) -> None:
    """Drive the top-level menu until the user quits or input runs out."""

    policy = policy if policy is not None else AccessPolicy()
    editor = GameEditor(
        collection, presenter, identity, policy=policy, render_limit=render_limit
    )
    player = GamePlayer(collection, presenter, identity, policy=policy)

    user = identity.current_user()
    role = "administrator" if policy.is_admin(user) else "author"
    presenter.display_text(f"Welcome, {user} ({role})!")

    while True:
        try:
            selected = MENU_OPTIONS[presenter.choose(MENU_OPTIONS, "\nMain menu")]
            if selected == QUIT:
                presenter.display_text("\nGoodbye!")
                break
            if selected == PLAY:
                player.play_game()
            elif selected == CREATE:
                editor.create_game()
            elif selected == EDIT:
                editor.edit_game()
        except EOFError:
            presenter.display_text("\n\nReached end of input. Until next time!")
            break
        except KeyboardInterrupt:
            presenter.display_text("\n\nInterrupted. Unsaved edits were discarded.")
            break


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Branching fiction editor")
    parser.add_argument(
        "--user",
        required=True,
        help="Name of the user running this session (prefix admins with 'Admin_').",
    )
    parser.add_argument(
        "--data-path",
        type=Path,
        help=(
            "JSON file holding every game. "
            "Defaults to BRANCHINGFICTION_DATA_PATH or ./data/games.json."
        ),
    )
    parser.add_argument(
        "--no-persistence",
        action="store_true",
        help="Keep games in memory only for this run.",
    )
    parser.add_argument(
        "--admin-prefix",
        help="User name prefix that marks administrators (default: Admin_).",
    )
    parser.add_argument(
        "--render-limit",
        type=int,
        help="Maximum characters shown when outlining a dialogue subtree.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity written to stderr (default: WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Load the collection and start an interactive session."""

    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = EditorSettings.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(2) from exc

    render_limit = settings.render_limit
    if args.render_limit is not None:
        if args.render_limit < 1:
            print("--render-limit must be greater than zero.")
            raise SystemExit(2)
        render_limit = args.render_limit

    try:
        identity = SessionIdentity(args.user)
    except ValueError as exc:
        print(f"Invalid user name: {exc}")
        raise SystemExit(2) from exc

    store: CollectionStore
    if args.no_persistence:
        if args.data_path is not None:
            print(
                "--data-path was provided but persistence is disabled. "
                "Games will not be saved."
            )
        store = InMemoryCollectionStore()
    else:
        data_path = args.data_path if args.data_path is not None else settings.data_path
        store = FileCollectionStore(data_path)
        logger.info("Using game data at %s", data_path)

    policy = AccessPolicy(admin_prefix=args.admin_prefix or settings.admin_prefix)
    collection = GameCollection.load(store)

    run_cli(
        collection,
        ConsolePresenter(),
        identity,
        policy=policy,
        render_limit=render_limit,
    )


if __name__ == "__main__":
    main()
