# どこで: `src/driftsketch/core/particle.py`。
# 何を: 描画側へ渡す粒子 1 個分の読み取り専用レコードを定義する。
# なぜ: 実体（numpy 配列）を ParticleSystem に閉じ込め、描画側が状態を書き換えられないようにするため。

from __future__ import annotations

from dataclasses import dataclass

from .random_field import RGB255


@dataclass(frozen=True, slots=True)
class Particle:
    """位置・色・半径を持つ粒子のスナップショット。"""

    position: tuple[float, float]
    color: RGB255
    radius: float
