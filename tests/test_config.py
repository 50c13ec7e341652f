from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from webcam_capture.config import (
    DEFAULT_CAPTURE_CONFIG,
    AppConfig,
    BackendConfig,
    CaptureConfig,
    load_config,
    reload_config,
    get_config,
    resolve_options,
    split_cli_config_path,
)


def test_defaults_match_documented_values() -> None:
    """Defaults mirror the documented construction options."""
    cfg = CaptureConfig()
    assert (cfg.width, cfg.height, cfg.delay, cfg.quality) == (1280, 720, 0, 100)
    assert cfg.output == "jpeg"
    assert cfg.device is None
    assert cfg.callback_return == "location"
    assert cfg.verbose is False


def test_config_is_immutable() -> None:
    """Resolved options cannot be changed after construction."""
    cfg = CaptureConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.width = 10  # type: ignore[misc]


def test_resolve_options_none_returns_defaults() -> None:
    """No options means the defaults."""
    assert resolve_options(None) == DEFAULT_CAPTURE_CONFIG


def test_resolve_options_overrides_verbatim() -> None:
    """Present fields win without coercion or validation."""
    cfg = resolve_options({"width": "640", "output": "gif", "callbackReturn": "notreal"})
    assert cfg.width == "640"
    assert cfg.output == "gif"
    assert cfg.callback_return == "notreal"
    assert cfg.height == 720


def test_resolve_options_accepts_field_names_and_ignores_unknown() -> None:
    """Snake-case names work and unknown keys are dropped."""
    cfg = resolve_options({"callback_return": "buffer", "top_banner": True, "bogus": 1})
    assert cfg.callback_return == "buffer"
    assert cfg.top_banner is True
    assert not hasattr(cfg, "bogus")


def test_resolve_options_uses_custom_defaults() -> None:
    """Unset fields fall back to the given defaults."""
    defaults = CaptureConfig(width=320, quality=50)
    cfg = resolve_options({"quality": 90}, defaults)
    assert cfg.width == 320
    assert cfg.quality == 90


def test_resolve_options_passes_full_config_through() -> None:
    """A full config is taken as is."""
    cfg = CaptureConfig(delay=3)
    assert resolve_options(cfg) is cfg


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    """A missing file yields the default configuration."""
    assert load_config(tmp_path / "nope.toml") == AppConfig()


def test_load_config_reads_sections(tmp_path: Path) -> None:
    """Known keys are loaded and unknown keys ignored."""
    path = tmp_path / "webcam.toml"
    path.write_text(
        "[capture]\n"
        "width = 640\n"
        'output = "png"\n'
        'callbackReturn = "base64"\n'
        "unknown = 1\n"
        "\n"
        "[backend]\n"
        'name = "fswebcam"\n'
        "timeout = 2.5\n",
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.capture.width == 640
    assert cfg.capture.output == "png"
    assert cfg.capture.callback_return == "base64"
    assert cfg.capture.height == 720
    assert cfg.backend == BackendConfig(name="fswebcam", timeout=2.5)


def test_reload_config_replaces_cached_config(tmp_path: Path) -> None:
    """reload_config() refreshes the cached singleton."""
    path = tmp_path / "webcam.toml"
    path.write_text("[capture]\ndelay = 2\n", encoding="utf-8")

    reload_config(path)
    assert get_config().capture.delay == 2

    reload_config(tmp_path / "missing.toml")
    assert get_config() == AppConfig()


@pytest.mark.parametrize(
    "argv, expected_argv, expected_path",
    [
        (["prog"], ["prog"], None),
        (["prog", "-c", "a.toml", "shot"], ["prog", "shot"], Path("a.toml")),
        (["prog", "--config=b.toml"], ["prog"], Path("b.toml")),
        (["prog", "-c", "a.toml", "--config", "b.toml"], ["prog"], Path("b.toml")),
    ],
)
def test_split_cli_config_path(argv, expected_argv, expected_path) -> None:
    """The config option is removed from argv and returned."""
    assert split_cli_config_path(argv) == (expected_argv, expected_path)


@pytest.mark.parametrize("argv", [["prog", "--config"], ["prog", "-c"], ["prog", "--config="]])
def test_split_cli_config_path_requires_value(argv) -> None:
    """A config option without a path is rejected with a hint about webcam.toml."""
    with pytest.raises(ValueError, match="webcam.toml"):
        split_cli_config_path(argv)
