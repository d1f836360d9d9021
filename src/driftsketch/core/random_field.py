# どこで: `src/driftsketch/core/random_field.py`。
# 何を: 一様乱数・中心原点の乱数点・パレット色など、スケッチ全体が使う乱数関数を提供する。
# なぜ: 乱数の出どころを `np.random.Generator` に一本化し、seed 指定で再現できるようにするため。

from __future__ import annotations

import numpy as np

RGB255 = tuple[int, int, int]
RGB01 = tuple[float, float, float]

DODGERBLUE: RGB255 = (30, 144, 255)
WHITE: RGB255 = (255, 255, 255)
STEELBLUE: RGB255 = (70, 130, 180)
LIGHTSKYBLUE: RGB255 = (135, 206, 250)
DARKTURQUOISE: RGB255 = (0, 206, 209)
BLACK: RGB255 = (0, 0, 0)

# 粒子色はこの 5 色からだけ選ぶ（シーン全体の色味を揃える）。
PALETTE: tuple[RGB255, ...] = (
    DODGERBLUE,
    WHITE,
    STEELBLUE,
    LIGHTSKYBLUE,
    DARKTURQUOISE,
)
_PALETTE_ARRAY = np.asarray(PALETTE, dtype=np.uint8)


def make_rng(seed: int | None = None) -> np.random.Generator:
    """乱数生成器を返す。`seed=None` の場合は OS エントロピーから初期化する。"""

    return np.random.default_rng(None if seed is None else int(seed))


def uniform(rng: np.random.Generator) -> float:
    """[0, 1) の一様乱数を 1 つ返す。"""

    return float(rng.random())


def random_point(
    rng: np.random.Generator, width: float, height: float
) -> tuple[float, float]:
    """中心原点の矩形 `[-w/2, w/2) x [-h/2, h/2)` 上の一様乱数点を返す。"""

    x = (uniform(rng) - 0.5) * float(width)
    y = (uniform(rng) - 0.5) * float(height)
    return x, y


def random_points(
    rng: np.random.Generator, n: int, width: float, height: float
) -> np.ndarray:
    """`random_point` を n 回分まとめて生成し、shape (n, 2) の配列で返す。"""

    size = np.asarray([float(width), float(height)], dtype=np.float64)
    return (rng.random((int(n), 2)) - 0.5) * size


def random_color(rng: np.random.Generator) -> RGB255:
    """パレットから一様に 1 色選んで返す。"""

    r, g, b = PALETTE[int(rng.integers(0, len(PALETTE)))]
    return r, g, b


def random_colors(rng: np.random.Generator, n: int) -> np.ndarray:
    """パレット色を n 個選び、shape (n, 3) の uint8 配列で返す。"""

    idx = rng.integers(0, len(PALETTE), size=int(n))
    return _PALETTE_ARRAY[idx].copy()


def random_rgb01(rng: np.random.Generator) -> RGB01:
    """各チャンネル独立な [0, 1) の一様乱数で RGB を返す。"""

    r, g, b = rng.random(3)
    return float(r), float(g), float(b)


def rgb255_to_rgb01(rgb: RGB255) -> RGB01:
    """0..255 int の RGB を 0..1 float の RGB に変換して返す。"""

    r, g, b = rgb
    return float(r) / 255.0, float(g) / 255.0, float(b) / 255.0


__all__ = [
    "BLACK",
    "DARKTURQUOISE",
    "DODGERBLUE",
    "LIGHTSKYBLUE",
    "PALETTE",
    "RGB01",
    "RGB255",
    "STEELBLUE",
    "WHITE",
    "make_rng",
    "random_color",
    "random_colors",
    "random_point",
    "random_points",
    "random_rgb01",
    "rgb255_to_rgb01",
    "uniform",
]
