# どこで: `src/driftsketch/core/animation.py`。
# 何を: tick（状態更新）と render（描画）の順序とフレーム番号を管理する AnimationLoop を提供する。
# なぜ: 「更新が完了してから描画が読む」順序と初回フレームの判定を、グローバル状態に頼らず 1 箇所で保証するため。

from __future__ import annotations

from typing import Callable

from .protocols import Renderer


class AnimationLoop:
    """1 tick ごとに update を 1 回、続けて render を 1 回呼ばせるドライバ。

    Notes
    -----
    `frame_index` は tick のたびに 1 増える。最初の render は `frame_index == 1` を見る。
    """

    def __init__(
        self,
        update: Callable[[], None],
        view: Callable[[Renderer, int], None],
    ) -> None:
        self._update = update
        self._view = view
        self._frame_index = 0
        self._rendering = False
        self._ticking = False

    @property
    def frame_index(self) -> int:
        """完了した tick の数（1-based のフレーム番号）を返す。"""

        return int(self._frame_index)

    def tick(self) -> None:
        """状態を 1 フレーム分進める。"""

        if self._rendering:
            raise RuntimeError("render 中に tick は呼べません")
        if self._ticking:
            raise RuntimeError("tick は再入できません")
        self._ticking = True
        try:
            self._update()
        finally:
            self._ticking = False
        self._frame_index += 1

    def render(self, renderer: Renderer) -> None:
        """直前の tick で確定した状態を描く。"""

        if self._rendering:
            raise RuntimeError("render は再入できません")
        if self._ticking:
            raise RuntimeError("tick 中に render は呼べません")
        if self._frame_index == 0:
            raise RuntimeError("render の前に少なくとも 1 回 tick が必要です")
        self._rendering = True
        try:
            self._view(renderer, self._frame_index)
        finally:
            self._rendering = False
