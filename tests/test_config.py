import json
from pathlib import Path

from nebula.presentation.cli import config
from nebula.presentation.cli.config import CliConfig, load_config, save_config


def test_missing_config_returns_defaults(tmp_path: Path) -> None:
    loaded = load_config(tmp_path / "absent.json")

    assert loaded == CliConfig()
    assert loaded.eof_policy == "fallback"
    assert loaded.text_display_mode == "instant"


def test_corrupt_config_returns_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{broken", encoding="utf-8")
    assert load_config(path) == CliConfig()

    path.write_text("[1, 2]", encoding="utf-8")
    assert load_config(path) == CliConfig()


def test_unknown_values_are_normalized(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "text_display_mode": "teletype",
                "char_delay_ms": -3,
                "pause_ms": "fast",
                "eof_policy": "retry",
                "flush_before_read": False,
            }
        ),
        encoding="utf-8",
    )
    loaded = load_config(path)

    assert loaded.text_display_mode == "instant"
    assert loaded.char_delay_ms == 6
    assert loaded.pause_ms == 250
    assert loaded.eof_policy == "fallback"
    assert loaded.flush_before_read is False


def test_save_then_load_preserves_options(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    original = CliConfig(text_display_mode="typewriter", char_delay_ms=0, pause_ms=10, eof_policy="abort")
    save_config(original, path)

    assert load_config(path) == original
    assert json.loads(path.read_text(encoding="utf-8"))["eof_policy"] == "abort"


def test_with_overrides_skips_none_and_normalizes() -> None:
    base = CliConfig(pause_ms=100)
    updated = base.with_overrides(eof_policy="abort", pause_ms=None, text_display_mode="typewriter")

    assert updated.eof_policy == "abort"
    assert updated.pause_ms == 100
    assert updated.text_display_mode == "typewriter"
    assert base.with_overrides(pause_ms=-5).pause_ms == 250


def test_user_data_dir_on_posix(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config.os, "name", "posix")
    monkeypatch.setattr(config.Path, "home", classmethod(lambda cls: tmp_path))

    assert config.get_default_config_path() == tmp_path / ".config" / "signal_in_the_nebula" / "config.json"
