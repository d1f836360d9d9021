# どこで: `src/driftsketch/core/protocols.py`。
# 何を: 外部協調者（Renderer / WidgetHost）の最小インターフェースを Protocol で定義する。
# なぜ: core を pyglet/moderngl/imgui から切り離し、テストでは記録用の偽実装を差し込めるようにするため。

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

from .random_field import RGB01

if TYPE_CHECKING:
    from .controls import ControlDescriptor


class Renderer(Protocol):
    """1 フレーム分の描画命令を受け付ける描画先。"""

    def draw_background(self, color: RGB01) -> None:
        """キャンバス全体を不透明色で塗りつぶす。"""
        ...

    def draw_fade_overlay(self, alpha: float = 0.05) -> None:
        """キャンバス全体へ低不透明度の黒を重ね、前フレームを少しだけ薄める。"""
        ...

    def draw_ellipse(
        self,
        center: tuple[float, float],
        radius: float,
        color: RGB01,
        resolution: int | None = None,
        rotation: float = 0.0,
    ) -> None:
        """円（resolution 指定時は正多角形）を塗りつぶしで描く。"""
        ...


class BatchRenderer(Renderer, Protocol):
    """同じ見た目の円をまとめて受け付けられる Renderer。"""

    def draw_ellipses(
        self,
        centers: np.ndarray,
        radii: np.ndarray,
        colors: np.ndarray,
        resolution: int | None = None,
    ) -> None:
        """(N, 2) 中心・(N,) 半径・(N, 3) 0..1 色の円を入力順に描く。"""
        ...

class WidgetHost(Protocol):
    """immediate-mode のウィジェット描画先。"""

    def submit(self, descriptor: ControlDescriptor) -> Any | None:
        """記述子を 1 つ描画し、このフレームのユーザー入力（無ければ None）を返す。"""
        ...
