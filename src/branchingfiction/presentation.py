"""Input/output capability injected into editing and playing sessions."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Callable, List, Sequence, TextIO


class Presenter(ABC):
    """Everything a session needs to show text and read answers."""

    @abstractmethod
    def display_list(self, items: Sequence[str], caption: str) -> None:
        """Show ``items`` underneath ``caption``."""

    @abstractmethod
    def prompt_inputs(self, labels: Sequence[str], caption: str) -> List[str]:
        """Ask for one line per label and return the answers in order."""

    @abstractmethod
    def display_text(self, text: str, context: str = "") -> None:
        """Show ``text`` with an optional secondary ``context`` block."""

    @abstractmethod
    def prompt_line(self, caption: str, context: str = "") -> str:
        """Show ``context`` and ``caption`` and return one line of input."""

    @abstractmethod
    def choose(self, options: Sequence[str], caption: str = "") -> int:
        """Present ``options`` and return the 0-based index picked."""


class ConsolePresenter(Presenter):
    """Presenter writing to a text stream and reading through ``input_fn``.

    ``input_fn`` defaults to :func:`input`; ``EOFError`` and
    ``KeyboardInterrupt`` raised by it propagate to the caller.
    """

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] | None = None,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_fn if input_fn is not None else input
        self._output = output if output is not None else sys.stdout

    def display_list(self, items: Sequence[str], caption: str) -> None:
        self._write(caption)
        if not items:
            self._write("  (none)")
        for item in items:
            self._write(f"  - {item}")
        self._write("")

    def prompt_inputs(self, labels: Sequence[str], caption: str) -> List[str]:
        self._write(caption)
        return [self._input(f"{label} ").strip() for label in labels]

    def display_text(self, text: str, context: str = "") -> None:
        if context:
            self._write(context)
            self._write("")
        self._write(text)

    def prompt_line(self, caption: str, context: str = "") -> str:
        if context:
            self._write(context)
            self._write("")
        self._write(caption)
        return self._input("> ").strip()

    def choose(self, options: Sequence[str], caption: str = "") -> int:
        if not options:
            raise ValueError("choose() requires at least one option")
        if caption:
            self._write(caption)
        for number, option in enumerate(options, start=1):
            self._write(f"  {number}. {option}")

        while True:
            answer = self._input("> ").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return int(answer) - 1
            self._write(f"Enter a number between 1 and {len(options)}.")

    def _write(self, text: str) -> None:
        self._output.write(f"{text}\n")
        self._output.flush()


__all__ = ["Presenter", "ConsolePresenter"]
