# どこで: `src/driftsketch/interactive/draw_window.py`。
# 何を: ライブ描画用の pyglet ウィンドウ生成を行う。
# なぜ: interactive 依存をこの層に閉じ込め、core をヘッドレスに保つため。

from __future__ import annotations

import pyglet
from pyglet.gl import Config
from pyglet.window import Window

from driftsketch.interactive.render_settings import RenderSettings


def create_draw_window(settings: RenderSettings) -> Window:
    """設定に基づき描画ウィンドウを生成する。"""
    # キャンバス FBO から画面へ blit するため、既定 framebuffer はマルチサンプルにしない。
    config = Config(double_buffer=True)  # type: ignore[abstract]
    canvas_w, canvas_h = settings.canvas_size
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(canvas_w * settings.render_scale),
        height=int(canvas_h * settings.render_scale),
        resizable=False,
        caption=str(settings.caption),
        config=config,
    )
    return window
