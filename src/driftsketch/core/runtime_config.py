# どこで: `src/driftsketch/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: ウィンドウ配置やログレベルなど、スケッチ本体と無関係な設定をユーザー側で上書きできるようにするため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """driftsketch の実行時設定。"""

    config_path: Path | None
    window_pos_draw: tuple[int, int]
    window_pos_control_panel: tuple[int, int]
    control_panel_window_size: tuple[int, int]
    log_level: int


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None

_LOG_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".driftsketch" / "config.yaml",
        home / ".config" / "driftsketch" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except TypeError as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        x = int(seq[0])
        y = int(seq[1])
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc
    return (x, y)


def _as_log_level(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return int(value)
    name = str(value).strip().upper()
    level = _LOG_LEVELS.get(name)
    if level is None:
        raise RuntimeError(
            f"{key} は {sorted(_LOG_LEVELS)} のいずれかである必要があります: got={value!r}"
        )
    return level


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    blob = (
        resources.files("driftsketch")
        .joinpath("resource").joinpath("default_config.yaml")
        .read_text(encoding="utf-8")
    )
    return _load_yaml_text(blob, source="driftsketch/resource/default_config.yaml")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping 同士を再帰的にマージした dict を返す（override が後勝ち）。"""

    out = dict(base)
    for k, v in override.items():
        prev = out.get(k)
        if isinstance(prev, dict) and isinstance(v, dict):
            out[k] = _merge(prev, v)
        else:
            out[k] = v
    return out


def _lookup(payload: dict[str, Any], dotted: str) -> Any:
    """`"ui.window_positions.draw"` のような dotted key で値を引く（途中が無ければ None）。"""

    node: Any = payload
    parts = dotted.split(".")
    for i, part in enumerate(parts):
        prefix = ".".join(parts[:i]) or "<root>"
        node = _as_mapping(node, key=prefix).get(part)
        if node is None:
            return None
    return node


def _required(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _check_version(payload: dict[str, Any]) -> None:
    version = _required(payload.get("version"), key="version")
    try:
        version_i = int(version)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")


def _build_config(payload: dict[str, Any], *, source: Path | None) -> RuntimeConfig:
    """マージ済み payload を検証して RuntimeConfig にする。"""

    _check_version(payload)

    def pair(key: str) -> tuple[int, int]:
        return _required(_as_int_pair(_lookup(payload, key), key=key), key=key)

    panel_size = pair("ui.control_panel.window_size")
    if min(panel_size) <= 0:
        raise ValueError(
            f"ui.control_panel.window_size は正の値である必要があります: got={panel_size}"
        )

    level = _as_log_level(_lookup(payload, "logging.level"), key="logging.level")
    return RuntimeConfig(
        config_path=source,
        window_pos_draw=pair("ui.window_positions.draw"),
        window_pos_control_panel=pair("ui.window_positions.control_panel"),
        control_panel_window_size=panel_size,
        log_level=int(_required(level, key="logging.level")),
    )


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す。

    優先順位は「明示パス > 探索で見つかった config.yaml > 同梱デフォルト」。
    結果はキャッシュし、`set_config_path()` を呼ぶまで再ロードしない。
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path = next((p for p in _default_config_candidates() if p.is_file()), None)

    payload = _load_packaged_default_config()
    for layer in (discovered_path, explicit_path):
        if layer is not None:
            payload = _merge(payload, _load_yaml_config(layer))

    _CONFIG_CACHE = _build_config(payload, source=explicit_path or discovered_path)
    return _CONFIG_CACHE


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
