from __future__ import annotations

# どこで: `src/driftsketch/interactive/gl/utils.py`。
# 何を: 描画で使う小さなユーティリティ（投影行列・多角形/矩形の三角形分割）を提供する。
# なぜ: renderer から幾何計算を切り離し、GL 無しでテストできるようにするため。

import math
from functools import lru_cache

import numpy as np

# resolution 未指定時の円の分割数（半径に比例、上下限つき）。
MIN_CIRCLE_RESOLUTION = 8
MAX_CIRCLE_RESOLUTION = 64


def build_projection(canvas_width: float, canvas_height: float) -> "np.ndarray":
    """中心原点・y 上向きのキャンバス座標を NDC へ写す正射影行列（ModernGL 用の転置済み）を返す。"""
    proj = np.array(
        [
            [2 / canvas_width, 0, 0, 0],
            [0, 2 / canvas_height, 0, 0],
            [0, 0, -1, 0],
            [0, 0, 0, 1],
        ],
        dtype="f4",
    ).T
    return proj


def default_resolution(radius: float) -> int:
    """半径から円の分割数を決める。"""

    n = int(math.ceil(float(radius) * 2.0))
    return max(MIN_CIRCLE_RESOLUTION, min(MAX_CIRCLE_RESOLUTION, n))


@lru_cache(maxsize=128)
def _unit_polygon_triangles(resolution: int) -> np.ndarray:
    angles = np.arange(resolution + 1, dtype=np.float64) * (math.tau / float(resolution))
    ring = np.stack([np.cos(angles), np.sin(angles)], axis=1)
    out = np.zeros((resolution, 3, 2), dtype=np.float64)
    out[:, 1, :] = ring[:-1]
    out[:, 2, :] = ring[1:]
    out = out.reshape(-1, 2)
    out.flags.writeable = False
    return out


def polygon_triangles(
    center: tuple[float, float],
    radius: float,
    resolution: int,
    rotation: float = 0.0,
) -> np.ndarray:
    """正 n 角形を中心からの三角形列 (n*3, 2) float32 に分割して返す。

    Parameters
    ----------
    center : tuple[float, float]
        中心座標。
    radius : float
        外接円の半径。
    resolution : int
        頂点数（3 以上）。
    rotation : float
        回転角 [rad]。1 頂点目は角度 `rotation` に置かれる。
    """

    n = int(resolution)
    if n < 3:
        raise ValueError(f"resolution は 3 以上である必要があります: got={resolution!r}")
    unit = _unit_polygon_triangles(n)
    c, s = math.cos(float(rotation)), math.sin(float(rotation))
    rot = np.array([[c, s], [-s, c]], dtype=np.float64)
    cx, cy = center
    pts = (unit @ rot) * float(radius) + np.array([float(cx), float(cy)])
    return pts.astype(np.float32)


def ellipse_batch_triangles(
    centers: np.ndarray,
    radii: np.ndarray,
    resolution: int,
) -> np.ndarray:
    """N 個の円（同じ分割数）をまとめて三角形列 (N*resolution*3, 2) float32 にする。

    並びは入力順で、i 番目の円の頂点は `[i*resolution*3, (i+1)*resolution*3)` に入る。
    """

    n = int(resolution)
    if n < 3:
        raise ValueError(f"resolution は 3 以上である必要があります: got={resolution!r}")
    unit = _unit_polygon_triangles(n)
    c = np.asarray(centers, dtype=np.float64).reshape(-1, 2)
    r = np.asarray(radii, dtype=np.float64).reshape(-1)
    pts = c[:, None, :] + r[:, None, None] * unit[None, :, :]
    return pts.reshape(-1, 2).astype(np.float32)


def rect_triangles(width: float, height: float) -> np.ndarray:
    """中心原点の width x height 矩形を 2 枚の三角形 (6, 2) float32 で返す。"""

    hw = float(width) / 2.0
    hh = float(height) / 2.0
    return np.array(
        [
            [-hw, -hh],
            [hw, -hh],
            [hw, hh],
            [-hw, -hh],
            [hw, hh],
            [-hw, hh],
        ],
        dtype=np.float32,
    )
