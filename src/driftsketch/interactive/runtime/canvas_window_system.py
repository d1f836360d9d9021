# どこで: `src/driftsketch/interactive/runtime/canvas_window_system.py`。
# 何を: AnimationLoop の render を描画ウィンドウ（CanvasRenderer）へ流すサブシステムを提供する。
# なぜ: `src/driftsketch/api/runner.py` を「配線」に寄せ、描画責務を独立させるため。

from __future__ import annotations

from driftsketch.core.animation import AnimationLoop
from driftsketch.interactive.draw_window import create_draw_window
from driftsketch.interactive.gl.canvas_renderer import CanvasRenderer
from driftsketch.interactive.render_settings import RenderSettings


class CanvasWindowSystem:
    """描画（メインウィンドウ）のサブシステム。"""

    def __init__(self, loop: AnimationLoop, *, settings: RenderSettings) -> None:
        """描画用の window/renderer を初期化する。"""

        self._loop = loop
        self._settings = settings
        # 描画用の pyglet window を作成し、その window の OpenGL コンテキストに紐づく renderer を作る。
        self.window = create_draw_window(settings)
        try:
            self._renderer = CanvasRenderer(self.window, settings)
        except Exception:
            # renderer が作れない（GL 4.1 非対応など）場合も window は閉じる。
            self.window.close()
            raise

    def _framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self.window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return int(self.window.width), int(self.window.height)

    def draw_frame(self) -> None:
        """直前の tick の状態を 1 フレーム分描画する（`flip()` は呼ばない）。"""

        # 注: 呼び出し側（pyglet.window.Window.draw）が事前に self.window.switch_to() 済みである前提。
        # OS 由来の on_draw が最初の tick より先に来ることがあるので、その場合は何も描かない。
        if self._loop.frame_index == 0:
            return
        self._renderer.begin_frame(self._framebuffer_size())
        self._loop.render(self._renderer)
        self._renderer.end_frame()

    def close(self) -> None:
        """GPU / window 資源を解放する。"""

        # renderer が保持している GPU リソースを破棄してから window を閉じる。
        self._renderer.release()
        self.window.close()
