import logging
from pathlib import Path

import pytest

from driftsketch.core.runtime_config import runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_packaged_defaults(isolated: Path):
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.window_pos_draw == (25, 25)
    assert cfg.window_pos_control_panel == (1100, 25)
    assert cfg.control_panel_window_size == (320, 480)
    assert cfg.log_level == logging.INFO


def test_discovered_config_is_deep_merged(isolated: Path):
    discovered = _write(
        isolated / ".driftsketch" / "config.yaml",
        "ui:\n  window_positions:\n    draw: [100, 200]\nlogging:\n  level: debug\n",
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.window_pos_draw == (100, 200)
    # 指定していないキーは同梱デフォルトのまま。
    assert cfg.window_pos_control_panel == (1100, 25)
    assert cfg.control_panel_window_size == (320, 480)
    assert cfg.log_level == logging.DEBUG


def test_home_config_is_discovered(isolated: Path):
    home_cfg = _write(
        isolated / ".config" / "driftsketch" / "config.yaml",
        "ui:\n  control_panel:\n    window_size: [400, 600]\n",
    )
    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.control_panel_window_size == (400, 600)


def test_explicit_config_overrides_discovered_config(isolated: Path):
    _write(
        isolated / ".driftsketch" / "config.yaml",
        "ui:\n  window_positions:\n    draw: [100, 200]\n    control_panel: [7, 8]\n",
    )
    explicit = _write(
        isolated / "explicit.yaml",
        "ui:\n  window_positions:\n    draw: [1, 2]\n",
    )
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.window_pos_draw == (1, 2)
    assert cfg.window_pos_control_panel == (7, 8)


def test_config_is_cached_until_path_changes(isolated: Path):
    first = runtime_config()
    assert runtime_config() is first

    explicit = _write(isolated / "explicit.yaml", "logging:\n  level: WARNING\n")
    set_config_path(explicit)
    second = runtime_config()
    assert second is not first
    assert second.log_level == logging.WARNING


def test_explicit_config_path_missing_raises(isolated: Path):
    set_config_path(isolated / "missing.yaml")
    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    "text",
    [
        "version: 2\n",
        "logging:\n  level: LOUD\n",
        "ui:\n  window_positions:\n    draw: [1, 2, 3]\n",
        "ui:\n  window_positions:\n    draw: [a, b]\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_config_raises_runtime_error(isolated: Path, text: str):
    set_config_path(_write(isolated / "bad.yaml", text))
    with pytest.raises(RuntimeError):
        runtime_config()


def test_non_positive_window_size_raises(isolated: Path):
    set_config_path(
        _write(isolated / "bad.yaml", "ui:\n  control_panel:\n    window_size: [0, 480]\n")
    )
    with pytest.raises(ValueError):
        runtime_config()
