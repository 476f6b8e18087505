"""Turns raw player text into a validated menu selection."""
from __future__ import annotations

from typing import Callable

from nebula.core.logging import get_logger
from nebula.core.types import EofPolicy
from nebula.services.errors import InputClosedError

FALLBACK_SELECTION = 1
DEFAULT_PROMPT = "Enter choice (1-{max_option}): "
NOT_A_NUMBER_MESSAGE = "Please enter a number."
OUT_OF_RANGE_MESSAGE = "Please choose a valid option."

_DIGITS = frozenset("0123456789")

log = get_logger(__name__)


def is_strict_number(raw: str) -> bool:
    """Return True when ``raw`` is a non-empty run of ASCII digits and nothing else."""
    return bool(raw) and set(raw) <= _DIGITS


class InputValidator:
    """Reads one line per attempt until it holds a number in ``[1, max_option]``.

    Lines are taken exactly as read: surrounding whitespace makes a line
    invalid rather than being trimmed. Empty lines re-prompt silently.
    When the input source is closed, ``eof_policy`` decides between
    returning :data:`FALLBACK_SELECTION` and raising ``InputClosedError``.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] | None = None,
        output_fn: Callable[[str], None] | None = None,
        *,
        eof_policy: EofPolicy = "fallback",
        prompt: str = DEFAULT_PROMPT,
    ) -> None:
        if eof_policy not in ("fallback", "abort"):
            raise ValueError(f"Unknown end-of-input policy: {eof_policy!r}")
        self._input_fn = input_fn or input
        self._output_fn = output_fn or print
        self._eof_policy = eof_policy
        self._prompt = prompt

    @property
    def eof_policy(self) -> EofPolicy:
        return self._eof_policy

    def read_selection(self, max_option: int) -> int:
        """Block until a valid 1-based selection is read and return it."""
        if max_option < 1:
            raise ValueError("max_option must be at least 1.")
        prompt = self._prompt.format(max_option=max_option)
        while True:
            try:
                line = self._input_fn(prompt)
            except EOFError:
                return self._on_input_closed(max_option)
            if not line:
                continue
            if not is_strict_number(line):
                log.debug("selection_rejected", reason="not_a_number", raw=line)
                self._output_fn(NOT_A_NUMBER_MESSAGE)
                continue
            value = int(line)
            if not 1 <= value <= max_option:
                log.debug("selection_rejected", reason="out_of_range", value=value, max_option=max_option)
                self._output_fn(OUT_OF_RANGE_MESSAGE)
                continue
            return value

    def _on_input_closed(self, max_option: int) -> int:
        if self._eof_policy == "abort":
            log.info("input_closed", policy="abort")
            raise InputClosedError("Input closed before a selection was made.")
        log.info("input_closed", policy="fallback", selection=FALLBACK_SELECTION, max_option=max_option)
        return FALLBACK_SELECTION
