"""Shared type aliases for the core and domain layers."""
from typing import Literal

SceneId = int
EofPolicy = Literal["fallback", "abort"]
TextDisplayMode = Literal["instant", "typewriter"]

__all__ = ["EofPolicy", "SceneId", "TextDisplayMode"]
