"""Helpers for resolving data file locations."""
from __future__ import annotations

from pathlib import Path

DEFAULT_STORY_FILENAME = "story.json"


def get_package_root() -> Path:
    """Return the directory of the installed ``nebula`` package."""
    return Path(__file__).resolve().parents[1]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Return the directory containing JSON definition files."""
    if base_path is not None:
        return Path(base_path)
    return get_package_root() / "data" / "definitions"


def get_default_story_path() -> Path:
    """Return the path of the story shipped with the package."""
    return get_definitions_path() / DEFAULT_STORY_FILENAME
