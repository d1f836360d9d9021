# どこで: `src/driftsketch/api/__init__.py`。
# 何を: 公開 API（各スケッチの run 関数）を再エクスポートする。
# なぜ: ユーザーコードから GUI 依存を意識せずに import できるようにするため。

from __future__ import annotations

__all__ = ["run_control_panel", "run_particles", "run_revolving_circles"]


def run_particles(*args, **kwargs):
    """粒子スケッチ run へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from .runner import run_particles as _run

    return _run(*args, **kwargs)


def run_control_panel(*args, **kwargs):
    """コントロールパネル run へのラッパ（遅延インポート）。"""

    from .runner import run_control_panel as _run

    return _run(*args, **kwargs)


def run_revolving_circles(*args, **kwargs):
    from .runner import run_revolving_circles as _run

    return _run(*args, **kwargs)
