# どこで: `src/driftsketch/core/particle_system.py`。
# 何を: 粒子群の生成と 1 tick ごとの移動更新（jiggle / coherent noise）を提供する。
# なぜ: 移動規則を構築時に選べる enum にし、描画や windowing と独立にテストできるようにするため。

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from .noise import NoiseField
from .particle import Particle
from .random_field import make_rng, random_colors, random_points

_logger = logging.getLogger(__name__)

CANVAS_SIZE_DEFAULT: tuple[int, int] = (2048, 1400)

RADIUS_MIN = 1.5
RADIUS_SPAN = 2.0

# jiggle の各軸変位は JIGGLE_AMPLITUDE * (u - 0.5)、すなわち [-1.5, 1.5)。
JIGGLE_AMPLITUDE = 3.0

# ノイズは画面全体ではなく小さなスケールで使う前提のため、位置を縮めてから評価する。
NOISE_SCALE_DEFAULT = 0.01


class MotionStrategy(str, Enum):
    """1 tick の変位の決め方。"""

    JIGGLE = "jiggle"
    COHERENT_NOISE = "coherent_noise"


class ParticleSystem:
    """固定数の粒子を保持し、tick ごとに位置を更新する。

    粒子数は構築時に固定され、増減しない。位置は画面外へ出てもラップ/クランプしない。
    """

    def __init__(
        self,
        positions: np.ndarray,
        colors: np.ndarray,
        radii: np.ndarray,
        *,
        strategy: MotionStrategy = MotionStrategy.JIGGLE,
        noise: NoiseField | None = None,
        rng: np.random.Generator | None = None,
        noise_scale: float = NOISE_SCALE_DEFAULT,
    ) -> None:
        positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        colors = np.array(colors, dtype=np.uint8).reshape(-1, 3)
        radii = np.array(radii, dtype=np.float64).reshape(-1)
        n = positions.shape[0]
        if colors.shape[0] != n or radii.shape[0] != n:
            raise ValueError(
                "positions/colors/radii の個数が一致しません: "
                f"{n}, {colors.shape[0]}, {radii.shape[0]}"
            )
        if not np.all(np.isfinite(positions)):
            raise ValueError("positions は有限値である必要があります")

        self._positions = positions
        self._colors = colors
        self._radii = radii
        self._strategy = MotionStrategy(strategy)
        self._noise = NoiseField() if noise is None else noise
        self._rng = make_rng() if rng is None else rng
        self._noise_scale = float(noise_scale)

    @classmethod
    def initialize(
        cls,
        n: int,
        *,
        canvas_size: tuple[int, int] = CANVAS_SIZE_DEFAULT,
        strategy: MotionStrategy = MotionStrategy.JIGGLE,
        seed: int | None = None,
        noise_scale: float = NOISE_SCALE_DEFAULT,
    ) -> ParticleSystem:
        """n 個の粒子をキャンバス全体へランダム配置して返す。

        Parameters
        ----------
        n : int
            粒子数（0 以上）。
        canvas_size : tuple[int, int]
            キャンバス寸法 (width, height)。原点は中心。
        strategy : MotionStrategy
            `update()` の変位規則。
        seed : int | None
            乱数とノイズ場の seed。None の場合は毎回異なる配置になる。
        noise_scale : float
            coherent noise 評価前に位置へ掛ける係数。

        Returns
        -------
        ParticleSystem
            ちょうど n 個の粒子を持つ ParticleSystem。
        """

        count = int(n)
        if count < 0:
            raise ValueError(f"粒子数は 0 以上である必要があります: got={n!r}")
        width, height = canvas_size
        if float(width) <= 0 or float(height) <= 0:
            raise ValueError(f"canvas_size は正の値である必要があります: got={canvas_size!r}")

        rng = make_rng(seed)
        positions = random_points(rng, count, width, height)
        colors = random_colors(rng, count)
        radii = RADIUS_MIN + rng.random(count) * RADIUS_SPAN

        _logger.debug(
            "ParticleSystem initialized: n=%d canvas=%sx%s strategy=%s",
            count,
            width,
            height,
            MotionStrategy(strategy).value,
        )
        return cls(
            positions,
            colors,
            radii,
            strategy=strategy,
            noise=NoiseField(seed),
            rng=rng,
            noise_scale=noise_scale,
        )

    def __len__(self) -> int:
        return int(self._positions.shape[0])

    @property
    def strategy(self) -> MotionStrategy:
        """構築時に確定した変位規則を返す。"""

        return self._strategy

    @property
    def noise(self) -> NoiseField:
        return self._noise

    @property
    def positions(self) -> np.ndarray:
        """現在位置のコピー (N, 2) を返す。"""

        out = self._positions.copy()
        out.flags.writeable = False
        return out

    @property
    def colors(self) -> np.ndarray:
        out = self._colors.copy()
        out.flags.writeable = False
        return out

    @property
    def radii(self) -> np.ndarray:
        out = self._radii.copy()
        out.flags.writeable = False
        return out

    @property
    def particles(self) -> tuple[Particle, ...]:
        """描画用の読み取り専用スナップショット列を返す。"""

        out: list[Particle] = []
        for (x, y), (r, g, b), radius in zip(
            self._positions.tolist(), self._colors.tolist(), self._radii.tolist()
        ):
            out.append(Particle(position=(x, y), color=(r, g, b), radius=radius))
        return tuple(out)

    def displacements(self) -> np.ndarray:
        """現在の規則で 1 tick 分の変位 (N, 2) を計算して返す（位置は変えない）。"""

        n = len(self)
        if self._strategy is MotionStrategy.JIGGLE:
            return JIGGLE_AMPLITUDE * (self._rng.random((n, 2)) - 0.5)

        # 時間軸を持たない空間ノイズなので、同じ場所では毎回同じ変位になる。
        dx = self._noise.sample(self._positions, channel=0, scale=self._noise_scale)
        dy = self._noise.sample(self._positions, channel=1, scale=self._noise_scale)
        return np.stack([dx, dy], axis=1)

    def update(self) -> None:
        """全粒子の位置へ 1 tick 分の変位を加える。"""

        self._positions += self.displacements()
