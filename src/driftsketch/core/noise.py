"""seed 固定の 3D Perlin ノイズ場（粒子のコヒーレントな揺らぎ用）。"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numba import njit  # type: ignore[import-untyped]

# Perlin ノイズ用定数（Ken Perlin improved noise の標準テーブル）。
_PERM_256 = [
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225, 140,
    36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148, 247, 120,
    234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32, 57, 177, 33,
    88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175, 74, 165, 71,
    134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122, 60, 211, 133,
    230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54, 65, 25, 63, 161,
    1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169, 200, 196, 135, 130,
    116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64, 52, 217, 226, 250,
    124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212, 207, 206, 59, 227,
    47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213, 119, 248, 152, 2, 44,
    154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9, 129, 22, 39, 253, 19,
    98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104, 218, 246, 97, 228,
    251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241, 81, 51, 145, 235,
    249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157, 184, 84, 204, 176,
    115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93, 222, 114, 67, 29,
    24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
]

_GRAD3_12 = [
    [1, 1, 0],
    [-1, 1, 0],
    [1, -1, 0],
    [-1, -1, 0],
    [1, 0, 1],
    [-1, 0, 1],
    [1, 0, -1],
    [-1, 0, -1],
    [0, 1, 1],
    [0, -1, 1],
    [0, 1, -1],
    [0, -1, -1],
]

NOISE_GRADIENTS_3D = np.asarray(_GRAD3_12, dtype=np.float64)


def permutation_table(seed: int | None = None) -> np.ndarray:
    """長さ 512 の置換テーブルを返す。

    `seed=None` は標準テーブル、整数 seed はその seed でシャッフルしたテーブル。
    """

    base = np.asarray(_PERM_256, dtype=np.int32)
    if seed is not None:
        base = np.random.default_rng(int(seed)).permutation(base).astype(np.int32)
    return np.concatenate([base, base])


@njit(fastmath=True, cache=True)
def fade(t):
    """Perlin ノイズ用のフェード関数。"""
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit(fastmath=True, cache=True)
def lerp(a, b, t):
    """線形補間。"""
    return a + t * (b - a)


@njit(fastmath=True, cache=True)
def grad(hash_val, x, y, z, grad3_array):
    """勾配ベクトル計算。"""
    idx = int(hash_val) % 12
    g = grad3_array[idx]
    return g[0] * x + g[1] * y + g[2] * z


@njit(fastmath=True, cache=True)
def perlin_noise_3d(x, y, z, perm_table, grad3_array):
    """3 次元 Perlin ノイズ生成。"""
    X = int(np.floor(x)) & 255
    Y = int(np.floor(y)) & 255
    Z = int(np.floor(z)) & 255

    x -= np.floor(x)
    y -= np.floor(y)
    z -= np.floor(z)

    u = fade(x)
    v = fade(y)
    w = fade(z)

    A = perm_table[X] + Y
    AA = perm_table[A & 511] + Z
    AB = perm_table[(A + 1) & 511] + Z
    B = perm_table[(X + 1) & 255] + Y
    BA = perm_table[B & 511] + Z
    BB = perm_table[(B + 1) & 511] + Z

    gAA = grad(perm_table[AA & 511], x, y, z, grad3_array)
    gBA = grad(perm_table[BA & 511], x - 1, y, z, grad3_array)
    gAB = grad(perm_table[AB & 511], x, y - 1, z, grad3_array)
    gBB = grad(perm_table[BB & 511], x - 1, y - 1, z, grad3_array)
    gAA1 = grad(perm_table[(AA + 1) & 511], x, y, z - 1, grad3_array)
    gBA1 = grad(perm_table[(BA + 1) & 511], x - 1, y, z - 1, grad3_array)
    gAB1 = grad(perm_table[(AB + 1) & 511], x, y - 1, z - 1, grad3_array)
    gBB1 = grad(perm_table[(BB + 1) & 511], x - 1, y - 1, z - 1, grad3_array)

    return lerp(
        lerp(lerp(gAA, gBA, u), lerp(gAB, gBB, u), v),
        lerp(lerp(gAA1, gBA1, u), lerp(gAB1, gBB1, u), v),
        w,
    )


@njit(fastmath=True, cache=True)
def sample_plane(points, scale, channel, perm_table, grad3_array):
    """(N, 2) の点列を scale 倍した平面 z=channel 上でノイズを評価する。"""
    n = points.shape[0]
    result = np.zeros(n, dtype=np.float64)
    for i in range(n):
        x = points[i, 0] * scale
        y = points[i, 1] * scale
        result[i] = perlin_noise_3d(x, y, channel, perm_table, grad3_array)
    return result


class NoiseField:
    """seed 固定の連続ノイズ場 `(x, y, channel) -> float`。

    構築後は状態を持たない。同じ入力には常に同じ値（おおよそ [-1, 1]）を返す。
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._perm = permutation_table(seed)

    @property
    def seed(self) -> int | None:
        """構築時の seed を返す。"""

        return self._seed

    def noise(
        self,
        point: Sequence[float],
        channel: int | float,
        scale: float = 1.0,
    ) -> float:
        """1 点のノイズ値を返す。

        Parameters
        ----------
        point : Sequence[float]
            `(x, y)` 座標。
        channel : int | float
            3 次元目の座標。チャンネルごとに独立した値列を得るために使う。
        scale : float
            評価前に x, y に掛ける係数。

        Returns
        -------
        float
            ノイズ値。
        """

        x, y = point
        return float(
            perlin_noise_3d(
                float(x) * float(scale),
                float(y) * float(scale),
                float(channel),
                self._perm,
                NOISE_GRADIENTS_3D,
            )
        )

    def sample(self, points: np.ndarray, channel: int | float, scale: float = 1.0) -> np.ndarray:
        """点列 (N, 2) のノイズ値を shape (N,) で返す。"""

        pts = np.ascontiguousarray(points, dtype=np.float64).reshape(-1, 2)
        return sample_plane(pts, float(scale), float(channel), self._perm, NOISE_GRADIENTS_3D)


__all__ = ["NoiseField", "permutation_table", "perlin_noise_3d"]
