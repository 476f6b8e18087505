"""Console rendering for story sessions."""
from __future__ import annotations

import os
import sys
import time
from typing import Callable, Sequence, TextIO

from nebula.core.types import SceneId
from nebula.presentation.cli.config import CliConfig

SEPARATOR = "-" * 37
BANNER_RULE = "=" * 37


def debug_enabled() -> bool:
    """Return True only when NEBULA_DEBUG is explicitly set to '1'."""
    return os.getenv("NEBULA_DEBUG") == "1"


def format_history(history: Sequence[SceneId]) -> str:
    """Render a visited path as ``0 -> 1 -> 3``."""
    return " -> ".join(str(scene_id) for scene_id in history)


class ConsolePresenter:
    """Presenter that writes scenes, menus and the final path to a text stream.

    Pacing (typewriter output and the dots between scenes) lives here and
    only here; both are driven by ``config`` and ``sleep_fn``.
    """

    def __init__(
        self,
        config: CliConfig | None = None,
        *,
        stream: TextIO | None = None,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config or CliConfig()
        self._stream = stream
        self._sleep_fn = sleep_fn
        self._scenes_shown = 0

    @property
    def config(self) -> CliConfig:
        return self._config

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def banner(self, title: str, tagline: str | None = None) -> None:
        """Print the title card and an optional tagline."""
        self._write(f"\n{BANNER_RULE}\n")
        self._write(f"{title.upper():^{len(BANNER_RULE)}}".rstrip() + "\n")
        self._write(f"{BANNER_RULE}\n\n")
        if tagline:
            self._write_paced(tagline + "\n")
            self.pause_dots()

    def display_text(self, text: str) -> None:
        if self._scenes_shown:
            self.pause_dots()
        self._scenes_shown += 1
        self._write(f"\n{SEPARATOR}\n")
        self._write_paced(text)
        self._write("\n\n")

    def display_choices(self, labels: Sequence[str]) -> None:
        for index, label in enumerate(labels, start=1):
            self._write(f"  {index}) {label}\n")
        self._write("\n")
        if self._config.flush_before_read:
            self.stream.flush()

    def display_history(self, history: Sequence[SceneId]) -> None:
        self._write(f"{SEPARATOR}\n")
        self._write(f"Path Taken: {format_history(history)}\n")

    def farewell(self, message: str) -> None:
        self._write(f"\n{message}\n")
        self.stream.flush()

    def pause_dots(self, dots: int = 3) -> None:
        """Print a short beat of dots, sleeping between them when pacing is enabled."""
        delay = self._config.pause_ms / 1000
        for _ in range(dots):
            self._write(".")
            self.stream.flush()
            if delay > 0:
                self._sleep_fn(delay)
        self._write("\n")

    def _write_paced(self, text: str) -> None:
        delay = self._config.char_delay_ms / 1000
        if self._config.text_display_mode != "typewriter" or delay <= 0:
            self._write(text)
            return
        for char in text:
            self._write(char)
            self.stream.flush()
            self._sleep_fn(delay)

    def _write(self, text: str) -> None:
        self.stream.write(text)
