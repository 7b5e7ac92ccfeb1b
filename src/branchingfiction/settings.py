"""Configuration helpers for the console editor."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .access import ADMIN_PREFIX
from .navigator import DEFAULT_RENDER_LIMIT

DEFAULT_DATA_PATH = Path("data") / "games.json"


def _normalise_path(value: str | None, *, default: Path) -> Path:
    if value is None:
        return default

    trimmed = value.strip()
    if not trimmed:
        return default

    return Path(trimmed).expanduser()


def _normalise_string(value: str | None, *, default: str) -> str:
    if value is None:
        return default

    trimmed = value.strip()
    return trimmed or default


def _parse_positive_int(value: str | None, *, name: str, default: int) -> int:
    if value is None:
        return default

    trimmed = value.strip()
    if not trimmed:
        return default

    try:
        parsed = int(trimmed)
    except ValueError as exc:
        raise ValueError(f"{name} must be a positive integer.") from exc
    if parsed < 1:
        raise ValueError(f"{name} must be greater than zero.")
    return parsed


@dataclass(frozen=True)
class EditorSettings:
    """Runtime settings for the editor.

    Values come from environment variables so the data location can be set
    without touching code. Paths are expanded to support ``~`` prefixes while
    empty strings are treated as if the variable was unset.
    """

    data_path: Path = DEFAULT_DATA_PATH
    admin_prefix: str = ADMIN_PREFIX
    render_limit: int = DEFAULT_RENDER_LIMIT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EditorSettings":
        """Return settings populated from ``environ``.

        Args:
            environ: Optional mapping of environment variables. When omitted,
                :data:`os.environ` is used.

        Raises:
            ValueError: If ``BRANCHINGFICTION_RENDER_LIMIT`` is not a positive
                integer.
        """

        source = environ if environ is not None else os.environ

        return cls(
            data_path=_normalise_path(
                source.get("BRANCHINGFICTION_DATA_PATH"), default=DEFAULT_DATA_PATH
            ),
            admin_prefix=_normalise_string(
                source.get("BRANCHINGFICTION_ADMIN_PREFIX"), default=ADMIN_PREFIX
            ),
            render_limit=_parse_positive_int(
                source.get("BRANCHINGFICTION_RENDER_LIMIT"),
                name="BRANCHINGFICTION_RENDER_LIMIT",
                default=DEFAULT_RENDER_LIMIT,
            ),
        )


__all__ = ["DEFAULT_DATA_PATH", "EditorSettings"]
