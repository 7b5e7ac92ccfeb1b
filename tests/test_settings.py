from pathlib import Path

import pytest

from branchingfiction import EditorSettings
from branchingfiction.settings import DEFAULT_DATA_PATH


def test_defaults_when_environment_is_empty() -> None:
    settings = EditorSettings.from_env({})

    assert settings.data_path == DEFAULT_DATA_PATH
    assert settings.admin_prefix == "Admin_"
    assert settings.render_limit == 150


def test_values_are_read_and_normalised() -> None:
    settings = EditorSettings.from_env(
        {
            "BRANCHINGFICTION_DATA_PATH": " ~/fiction/games.json ",
            "BRANCHINGFICTION_ADMIN_PREFIX": " Root_ ",
            "BRANCHINGFICTION_RENDER_LIMIT": " 300 ",
        }
    )

    assert settings.data_path == Path("~/fiction/games.json").expanduser()
    assert settings.admin_prefix == "Root_"
    assert settings.render_limit == 300


def test_blank_values_fall_back_to_defaults() -> None:
    settings = EditorSettings.from_env(
        {
            "BRANCHINGFICTION_DATA_PATH": "   ",
            "BRANCHINGFICTION_ADMIN_PREFIX": "",
            "BRANCHINGFICTION_RENDER_LIMIT": " ",
        }
    )

    assert settings == EditorSettings()


@pytest.mark.parametrize("value", ["zero", "0", "-4"])
def test_render_limit_must_be_positive(value: str) -> None:
    with pytest.raises(ValueError):
        EditorSettings.from_env({"BRANCHINGFICTION_RENDER_LIMIT": value})
