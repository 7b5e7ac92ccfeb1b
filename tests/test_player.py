"""Tests for walking a game's choices."""

from __future__ import annotations

from typing import Any

from branchingfiction import GameCollection, GamePlayer, SessionIdentity


def _furnish(collection: GameCollection) -> None:
    _, tree = collection.open("Arena")
    left = tree.add_choice(0, "dodge")
    tree.set_text(left, "You roll aside.")
    win = tree.add_choice(left, "strike back")
    tree.set_text(win, "Victory!")
    tree.add_choice(0, "run")


def test_play_until_the_end(collection: GameCollection, make_presenter: Any) -> None:
    _furnish(collection)
    presenter = make_presenter(choices=[0, 0, 0])
    player = GamePlayer(collection, presenter, SessionIdentity("carol"))

    visited = player.play_game()

    assert visited == [0, 1, 2]
    assert presenter.shown == ["Fight!", "You roll aside.", "Victory!", "The End."]


def test_quit_mid_game(collection: GameCollection, make_presenter: Any) -> None:
    _furnish(collection)
    presenter = make_presenter(choices=[2])
    player = GamePlayer(collection, presenter, SessionIdentity("carol"))

    assert player.play("Arena") == [0]
    assert "The End." not in presenter.shown


def test_back_out_of_game_list(
    collection: GameCollection, make_presenter: Any
) -> None:
    presenter = make_presenter(choices=[2])
    player = GamePlayer(collection, presenter, SessionIdentity("carol"))

    assert player.play_game() == []
    assert presenter.shown == []


def test_private_games_are_listed_for_their_author(
    collection: GameCollection, make_presenter: Any
) -> None:
    presenter = make_presenter(choices=[2])
    player = GamePlayer(collection, presenter, SessionIdentity("alice"))

    assert player.play_game() == [0]
    assert presenter.shown == ["Dear diary.", "The End."]


def test_nothing_to_play(make_presenter: Any) -> None:
    presenter = make_presenter()
    player = GamePlayer(GameCollection(), presenter, SessionIdentity("carol"))

    assert player.play_game() == []
    assert presenter.shown == ["There are no games to play yet."]
