# どこで: `src/driftsketch/interactive/control_panel_gui.py`。
# 何を: ReactiveControlPanel を pyimgui + pyglet で表示する GUI（初期化/1フレーム描画/破棄）を提供する。
# なぜ: 依存の重いライフサイクル管理を 1 箇所に閉じ込め、パネルの状態遷移を純粋に保つため。

from __future__ import annotations

import time
from typing import Any

from driftsketch.core.controls import ControlState, ReactiveControlPanel

from .widget_host import ImGuiWidgetHost

DEFAULT_WINDOW_WIDTH = 320
DEFAULT_WINDOW_HEIGHT = 480
PANEL_MARGIN = 20.0
WIDGET_SPACING = 10.0


def _create_imgui_pyglet_renderer(imgui_pyglet_mod: Any, gui_window: Any) -> Any:
    """pyglet 用の ImGui renderer を作成する。"""

    factory = getattr(imgui_pyglet_mod, "create_renderer", None)
    if callable(factory):
        return factory(gui_window)
    renderer_type = getattr(imgui_pyglet_mod, "PygletRenderer", None)
    if renderer_type is None:
        raise RuntimeError("imgui.integrations.pyglet renderer is unavailable")
    return renderer_type(gui_window)


def _sync_imgui_io_for_window(imgui_mod: Any, gui_window: Any, *, dt: float) -> None:
    """ImGui IO をウィンドウ状態（サイズ/Retina スケール/Δt）に同期する。"""

    io = imgui_mod.get_io()
    io.delta_time = max(float(dt), 1e-4)

    fb_w, fb_h = gui_window.get_framebuffer_size()
    win_w, win_h = gui_window.width, gui_window.height
    io.display_size = (float(win_w), float(win_h))
    io.display_fb_scale = (
        float(fb_w) / float(max(1, win_w)),
        float(fb_h) / float(max(1, win_h)),
    )


def create_control_panel_window(
    *,
    width: int = DEFAULT_WINDOW_WIDTH,
    height: int = DEFAULT_WINDOW_HEIGHT,
    caption: str = "Controls",
    vsync: bool = False,
) -> Any:
    """コントロールパネル用の pyglet ウィンドウを生成する。"""

    import pyglet

    gl_cfg = pyglet.gl.Config(  # type: ignore[abstract]
        double_buffer=True,
        sample_buffers=1,
        samples=4,
    )
    return pyglet.window.Window(  # type: ignore[abstract]
        width=int(width),
        height=int(height),
        caption=str(caption),
        resizable=False,
        vsync=bool(vsync),
        config=gl_cfg,
    )


class ControlPanelGUI:
    """pyimgui で ReactiveControlPanel を表示・操作する GUI。

    `draw_frame()` を呼ぶことで 1 フレーム分の UI を描画し、入力を ControlState へ畳み込む。
    """

    def __init__(
        self,
        gui_window: Any,
        *,
        panel: ReactiveControlPanel,
        title: str = "Controls",
    ) -> None:
        """GUI の初期化（ImGui コンテキスト / renderer 作成）。"""

        import imgui  # type: ignore[import-untyped]
        from imgui.integrations import pyglet as imgui_pyglet  # type: ignore[import-untyped]

        self._window = gui_window
        self._panel = panel
        self._title = str(title)

        # ImGui は「グローバルな current context」を前提にするため、自前コンテキストを作って切り替えながら使う。
        self._imgui = imgui
        self._context = imgui.create_context()
        imgui.style_colors_dark()
        imgui.set_current_context(self._context)

        self._renderer = _create_imgui_pyglet_renderer(imgui_pyglet, gui_window)
        self._host = ImGuiWidgetHost(imgui)

        # ImGui に渡す delta_time 用の前回時刻。
        self._prev_time = time.monotonic()
        self._closed = False

    @property
    def state(self) -> ControlState:
        return self._panel.state

    def draw_frame(self) -> ControlState:
        """1 フレーム分の GUI を描画し、入力を反映した ControlState を返す。

        `flip()` は呼ばない。呼び出し側（pyglet.window.Window.draw）が担当する。
        """

        if self._closed:
            return self._panel.state

        now = time.monotonic()
        dt = now - self._prev_time
        self._prev_time = now

        imgui = self._imgui
        imgui.set_current_context(self._context)

        # 注: process_inputs() は内部で pyglet.clock.tick() を呼ぶため、pyglet.app.run() 駆動中は呼ばない。
        imgui.new_frame()
        _sync_imgui_io_for_window(imgui, self._window, dt=dt)

        imgui.set_next_window_position(0, 0)
        imgui.set_next_window_size(self._window.width, self._window.height)
        # WINDOW_PADDING は begin() 時点の値が使われるため、begin より前に push する。
        imgui.push_style_var(imgui.STYLE_WINDOW_PADDING, (PANEL_MARGIN, PANEL_MARGIN))
        imgui.push_style_var(imgui.STYLE_ITEM_SPACING, (WIDGET_SPACING, WIDGET_SPACING))
        imgui.begin(
            self._title,
            flags=imgui.WINDOW_NO_RESIZE
            | imgui.WINDOW_NO_COLLAPSE
            | imgui.WINDOW_NO_TITLE_BAR
            | imgui.WINDOW_NO_MOVE,
        )
        try:
            state = self._panel.update(self._host)
        finally:
            imgui.end()
            imgui.pop_style_var(2)

        imgui.render()

        import pyglet

        pyglet.gl.glClearColor(0.12, 0.12, 0.12, 1.0)
        self._window.clear()
        self._renderer.render(imgui.get_draw_data())
        return state

    def close(self) -> None:
        """GUI を終了し、コンテキストとウィンドウを破棄する。"""

        # 二重 close を許容する（呼び出し側の finally から安全に呼べるようにする）。
        if self._closed:
            return
        self._closed = True

        shutdown = getattr(self._renderer, "shutdown", None)
        if callable(shutdown):
            shutdown()
        self._imgui.destroy_context(self._context)
        self._window.close()
