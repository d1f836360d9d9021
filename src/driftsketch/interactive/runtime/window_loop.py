# どこで: `src/driftsketch/interactive/runtime/window_loop.py`。
# 何を: 複数の pyglet ウィンドウ（図形キャンバス / コントロールパネル）を 1 本の clock で回すループを提供する。
# なぜ: 「フレーム冒頭の更新 → 各ウィンドウの描画」の順序をこのループ 1 箇所で決めるため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import pyglet

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WindowTask:
    """ウィンドウと、その back buffer へ 1 フレーム描く関数の組。"""

    window: Any  # pyglet.window.Window（プラットフォーム別サブクラスがあるため Any）
    draw_frame: Callable[[], Any]


class MultiWindowLoop:
    """tasks を登録順に描く、単一スレッドのフレームループ。

    1 フレームは `on_frame_start()` の後に各 `Window.draw()`（switch_to → on_draw → flip）で進む。
    どれか 1 つのウィンドウが閉じられるとループ全体が終わる。
    """

    def __init__(
        self,
        tasks: list[WindowTask],
        *,
        fps: float,
        on_frame_start: Callable[[], None] | None = None,
    ) -> None:
        """
        Parameters
        ----------
        tasks : list[WindowTask]
            描画順に並べたウィンドウと描画処理。
        fps : float
            目標フレームレート。`<=0` なら clock の許す限り回す。
        on_frame_start : Callable[[], None] | None
            どのウィンドウを描くよりも前に毎フレーム呼ぶ更新処理。
        """

        self._tasks = tuple(tasks)
        self._fps = float(fps)
        self._on_frame_start = on_frame_start
        self._frames = 0

    @property
    def frames(self) -> int:
        """これまでに回したフレーム数。"""

        return self._frames

    def _on_close(self, *_: object) -> None:
        _logger.debug("window closed after %d frames; stopping loop", self._frames)
        pyglet.app.exit()

    def _step(self, dt: float) -> None:
        if self._on_frame_start is not None:
            self._on_frame_start()
        self._frames += 1

        open_windows = pyglet.app.windows
        for task in self._tasks:
            # 閉じ処理中のウィンドウは draw で例外になり得る。
            if task.window in open_windows:
                task.window.draw(dt)

    def run(self) -> None:
        """ウィンドウが閉じられるまでブロックする。"""

        for task in self._tasks:
            task.window.push_handlers(on_close=self._on_close, on_draw=task.draw_frame)

        if self._fps > 0:
            pyglet.clock.schedule_interval(self._step, 1.0 / self._fps)
        else:
            pyglet.clock.schedule(self._step)

        try:
            # interval=None: 再描画は _step が明示的に行う。
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(self._step)
