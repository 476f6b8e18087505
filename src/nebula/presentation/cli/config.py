"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path

from nebula.core.types import EofPolicy, TextDisplayMode

_DEFAULT_TEXT_MODE: TextDisplayMode = "instant"
_DEFAULT_EOF_POLICY: EofPolicy = "fallback"
_DEFAULT_CHAR_DELAY_MS = 6
_DEFAULT_PAUSE_MS = 250


@dataclass(frozen=True, slots=True)
class CliConfig:
    """Console presentation options, handed to the presenter at construction."""

    text_display_mode: TextDisplayMode = _DEFAULT_TEXT_MODE
    char_delay_ms: int = _DEFAULT_CHAR_DELAY_MS
    pause_ms: int = _DEFAULT_PAUSE_MS
    eof_policy: EofPolicy = _DEFAULT_EOF_POLICY
    flush_before_read: bool = True

    def with_overrides(self, **changes: object) -> "CliConfig":
        """Return a copy with every non-None override applied and normalized."""
        applied = {key: value for key, value in changes.items() if value is not None}
        return _normalize(asdict(replace(self, **applied)))


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "SignalInTheNebula"
        return Path.home() / "SignalInTheNebula"
    return Path.home() / ".config" / "signal_in_the_nebula"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def _normalize_text_mode(value: object) -> TextDisplayMode:
    return "typewriter" if value == "typewriter" else _DEFAULT_TEXT_MODE


def _normalize_eof_policy(value: object) -> EofPolicy:
    return "abort" if value == "abort" else _DEFAULT_EOF_POLICY


def _normalize_delay(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def _normalize(raw: dict[str, object]) -> CliConfig:
    return CliConfig(
        text_display_mode=_normalize_text_mode(raw.get("text_display_mode")),
        char_delay_ms=_normalize_delay(raw.get("char_delay_ms"), _DEFAULT_CHAR_DELAY_MS),
        pause_ms=_normalize_delay(raw.get("pause_ms"), _DEFAULT_PAUSE_MS),
        eof_policy=_normalize_eof_policy(raw.get("eof_policy")),
        flush_before_read=raw.get("flush_before_read") is not False,
    )


def load_config(path: Path | None = None) -> CliConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return CliConfig()
    if not isinstance(raw, dict):
        return CliConfig()
    return _normalize(raw)


def save_config(config: CliConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(_normalize(asdict(config)))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
