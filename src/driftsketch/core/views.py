# どこで: `src/driftsketch/core/views.py`。
# 何を: 状態を読み取り Renderer へ描画命令を発行する view 関数群を提供する。
# なぜ: 「何を描くか」を GL 実装から分離し、命令列としてテストできるようにするため。

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from .controls import ControlState
from .particle import Particle
from .protocols import BatchRenderer, Renderer
from .random_field import BLACK, STEELBLUE, WHITE, rgb255_to_rgb01

FADE_ALPHA = 0.05
SHAPE_BACKGROUND_RGB = (0.02, 0.02, 0.02)
FRAMES_PER_SECOND = 60.0


def draw_particle_frame(
    renderer: Renderer,
    particles: Iterable[Particle],
    frame_index: int,
) -> None:
    """粒子群を 1 フレーム描く。

    1 フレーム目だけ黒でクリアし、以降は薄い黒を重ねて軌跡を残す。
    """

    if int(frame_index) == 1:
        renderer.draw_background(rgb255_to_rgb01(BLACK))
    else:
        renderer.draw_fade_overlay(FADE_ALPHA)

    for p in particles:
        renderer.draw_ellipse(p.position, p.radius, rgb255_to_rgb01(p.color))


def draw_particle_batch(
    renderer: BatchRenderer,
    positions: np.ndarray,
    colors: np.ndarray,
    radii: np.ndarray,
    frame_index: int,
) -> None:
    """`draw_particle_frame` と同じ絵を、粒子配列から 1 回の `draw_ellipses` で描く。

    colors は (N, 3) の 0..255 値。
    """

    if int(frame_index) == 1:
        renderer.draw_background(rgb255_to_rgb01(BLACK))
    else:
        renderer.draw_fade_overlay(FADE_ALPHA)

    rgb01 = np.asarray(colors, dtype=np.float64).reshape(-1, 3) / 255.0
    renderer.draw_ellipses(positions, radii, rgb01)


def draw_control_shape(renderer: Renderer, state: ControlState) -> None:
    """ControlState の n 角形を描く。"""

    renderer.draw_background(SHAPE_BACKGROUND_RGB)
    renderer.draw_ellipse(
        state.position,
        state.scale,
        state.color,
        resolution=state.num_sides,
        rotation=state.rotation,
    )


def draw_revolving_circles(
    renderer: Renderer,
    frame_index: int,
    *,
    num_circles: int = 8,
    orbit_radius: float = 100.0,
    circle_radius: float = 10.0,
) -> None:
    """原点の周りを回る円列を描く。

    経過時間は `frame_index / 60`（約 60fps 想定の秒）で近似する。
    """

    renderer.draw_background(rgb255_to_rgb01(BLACK))
    n = int(num_circles)
    if n <= 0:
        return
    t = float(frame_index) / FRAMES_PER_SECOND
    for i in range(n):
        color = STEELBLUE if i % 2 == 0 else WHITE
        angle = t + (float(i) / float(n)) * math.tau
        center = (orbit_radius * math.cos(angle), orbit_radius * math.sin(angle))
        renderer.draw_ellipse(center, circle_radius, rgb255_to_rgb01(color))


__all__ = [
    "draw_control_shape",
    "draw_particle_batch",
    "draw_particle_frame",
    "draw_revolving_circles",
]
