# どこで: `src/driftsketch/interactive/runtime/control_panel_system.py`。
# 何を: コントロールパネルを「1フレーム描画できるサブシステム」として提供する。
# なぜ: `src/driftsketch/api/runner.py` の `run_control_panel()` から GUI 初期化/描画/後始末を分離するため。

from __future__ import annotations

from driftsketch.core.controls import ReactiveControlPanel
from driftsketch.core.runtime_config import runtime_config
from driftsketch.interactive.control_panel_gui import (
    ControlPanelGUI,
    create_control_panel_window,
)


class ControlPanelWindowSystem:
    """コントロールパネル（別ウィンドウ）のサブシステム。"""

    def __init__(self, panel: ReactiveControlPanel) -> None:
        """GUI 用の window と ControlPanelGUI を初期化する。"""

        cfg = runtime_config()
        w, h = cfg.control_panel_window_size
        self.window = create_control_panel_window(width=w, height=h, vsync=False)
        self._gui = ControlPanelGUI(self.window, panel=panel)

    def update(self) -> None:
        """GUI を 1 フレーム描画し、入力を ControlState へ反映する（`flip()` は呼ばない）。"""

        self._gui.draw_frame()

    def close(self) -> None:
        """GUI を終了し、ウィンドウを破棄する。"""

        self._gui.close()
