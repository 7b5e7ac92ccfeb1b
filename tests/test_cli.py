"""Smoke tests for the command-line entry point and top-level menu."""

from __future__ import annotations

import builtins
import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from main import main, run_cli
from branchingfiction import (
    AccessPolicy,
    GameCollection,
    InMemoryCollectionStore,
    SessionIdentity,
)


class _IteratorInput:
    """Callable helper that returns successive values, then signals EOF."""

    def __init__(self, values: Iterator[str]) -> None:
        self._values = values

    def __call__(self, prompt: str = "") -> str:
        del prompt
        try:
            return next(self._values)
        except StopIteration:
            raise EOFError from None


def _feed(monkeypatch: pytest.MonkeyPatch, *values: str) -> None:
    monkeypatch.setattr(builtins, "input", _IteratorInput(iter(values)))


def test_main_creates_and_persists_a_game(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    data_path = tmp_path / "data" / "games.json"
    _feed(monkeypatch, "2", "Maze", "Walls everywhere.", "4")

    main(["--user", "carol", "--data-path", str(data_path)])

    output = capsys.readouterr().out
    assert "Welcome, carol (author)!" in output
    assert "Created private game 'Maze'." in output
    assert "Goodbye!" in output

    payload = json.loads(data_path.read_text(encoding="utf-8"))
    assert [game["name"] for game in payload["games"]] == ["Maze"]
    assert payload["games"][0]["author"] == "carol"


def test_main_edit_session_round_trip(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    data_path = tmp_path / "games.json"
    store_collection = GameCollection(store=None)
    store_collection.create_game("Quest", "Admin_root", "You wake up.")
    data_path.write_text(
        store_collection.to_record().model_dump_json(), encoding="utf-8"
    )

    _feed(
        monkeypatch,
        "3",  # Edit a game
        "Quest",
        "2",  # Edit Game Dialogues
        "a0",
        "open your eyes",
        "",
        "",
        "c1",
        "Light floods in.",
        "d0",
        "c9",
        "e",
        "3",  # Exit and Save
        "4",  # Quit
    )

    main(["--user", "Admin_root", "--data-path", str(data_path)])

    output = capsys.readouterr().out
    assert "Welcome, Admin_root (administrator)!" in output
    assert "You cannot delete the first dialogue of the game!" in output
    assert "Wrong input." in output

    payload = json.loads(data_path.read_text(encoding="utf-8"))
    dialogues = payload["games"][0]["tree"]["dialogues"]
    assert dialogues[0]["choices"] == [{"label": "open your eyes", "target": 1}]
    assert dialogues[1]["text"] == "Light floods in."


def test_main_stops_at_end_of_input(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    _feed(monkeypatch)

    main(["--user", "carol", "--data-path", str(tmp_path / "games.json")])

    assert "Reached end of input." in capsys.readouterr().out
    assert not (tmp_path / "games.json").exists()


def test_main_recovers_from_corrupt_data(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture,
    caplog: pytest.LogCaptureFixture,
) -> None:
    data_path = tmp_path / "games.json"
    data_path.write_text("corrupted", encoding="utf-8")
    _feed(monkeypatch, "1", "4")

    main(["--user", "carol", "--data-path", str(data_path)])

    assert "There are no games to play yet." in capsys.readouterr().out
    assert "Could not load games" in caplog.text


def test_main_rejects_invalid_render_limit(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    monkeypatch.setenv("BRANCHINGFICTION_RENDER_LIMIT", "-3")

    with pytest.raises(SystemExit) as excinfo:
        main(["--user", "carol", "--no-persistence"])

    assert excinfo.value.code == 2
    assert "BRANCHINGFICTION_RENDER_LIMIT" in capsys.readouterr().out


def test_main_rejects_blank_user(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--user", "   ", "--no-persistence"])

    assert excinfo.value.code == 2
    assert "Invalid user name" in capsys.readouterr().out


def test_main_warns_when_data_path_is_ignored(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    _feed(monkeypatch, "4")

    main(
        [
            "--user",
            "carol",
            "--no-persistence",
            "--data-path",
            str(tmp_path / "games.json"),
        ]
    )

    assert "persistence is disabled" in capsys.readouterr().out
    assert not (tmp_path / "games.json").exists()


def test_run_cli_with_scripted_presenter(make_presenter: Any) -> None:
    collection = GameCollection(store=InMemoryCollectionStore())
    collection.create_game("Heist", "bob", "The vault looms.")
    presenter = make_presenter(["Heist"], choices=[2, 3, 3])

    run_cli(
        collection,
        presenter,
        SessionIdentity("Boss:eve"),
        policy=AccessPolicy(admin_prefix="Boss:"),
    )

    assert "Heist" not in collection
    assert presenter.shown[0] == "Welcome, Boss:eve (administrator)!"
    assert presenter.shown[-1] == "\nGoodbye!"
