# どこで: `src/driftsketch/interactive/widget_host.py`。
# 何を: ControlDescriptor を pyimgui のウィジェット（slider / button / XY pad）として描画し、入力を返す。
# なぜ: kind ごとの UI 実装を閉じ込め、ReactiveControlPanel からは WidgetHost プロトコルだけが見えるようにするため。

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from driftsketch.core.controls import ControlDescriptor, ControlKind

PAD_MARKER_RADIUS = 5.0


def _clamp01(v: float) -> float:
    return 0.0 if v < 0.0 else 1.0 if v > 1.0 else v


def _slider_format(descriptor: ControlDescriptor) -> str:
    # 辺数は整数に切り捨てられるため、小数を表示しない。
    if descriptor.key == "num_sides":
        return "%.0f"
    return "%.3f"


def pad_point_from_mouse(
    mouse: tuple[float, float],
    origin: tuple[float, float],
    size: tuple[float, float],
    bounds: tuple[tuple[float, float], tuple[float, float]],
) -> tuple[float, float]:
    """pad 上のマウス位置（画面座標, y 下向き）を pad の値域 (x, y)（y 上向き）へ写す。

    pad の外側は端に張り付く。
    """

    (xmin, xmax), (ymin, ymax) = bounds
    w, h = size
    u = _clamp01((float(mouse[0]) - float(origin[0])) / max(float(w), 1e-9))
    v = _clamp01((float(mouse[1]) - float(origin[1])) / max(float(h), 1e-9))
    x = float(xmin) + u * (float(xmax) - float(xmin))
    y = float(ymax) - v * (float(ymax) - float(ymin))
    return x, y


def pad_marker_from_value(
    value: tuple[float, float],
    origin: tuple[float, float],
    size: tuple[float, float],
    bounds: tuple[tuple[float, float], tuple[float, float]],
) -> tuple[float, float]:
    """pad の値 (x, y) を画面座標のマーカー位置へ写す（`pad_point_from_mouse` の逆）。"""

    (xmin, xmax), (ymin, ymax) = bounds
    w, h = size
    u = _clamp01((float(value[0]) - float(xmin)) / max(float(xmax) - float(xmin), 1e-9))
    v = _clamp01((float(ymax) - float(value[1])) / max(float(ymax) - float(ymin), 1e-9))
    return float(origin[0]) + u * float(w), float(origin[1]) + v * float(h)


class ImGuiWidgetHost:
    """pyimgui の current context へ記述子を描画する WidgetHost。

    Notes
    -----
    `imgui.new_frame()` と `imgui.begin()` の内側で `submit()` を呼ぶ前提。
    """

    def __init__(self, imgui_mod: Any) -> None:
        self._imgui = imgui_mod
        self._kind_to_widget: dict[ControlKind, Callable[[ControlDescriptor], Any | None]] = {
            ControlKind.SLIDER: self._slider,
            ControlKind.BUTTON: self._button,
            ControlKind.PAD: self._pad,
        }

    def submit(self, descriptor: ControlDescriptor) -> Any | None:
        """記述子を 1 つ描画し、このフレームの入力（無ければ None）を返す。"""

        fn = self._kind_to_widget.get(descriptor.kind)
        if fn is None:
            raise ValueError(f"unknown control kind: {descriptor.kind!r}")

        imgui = self._imgui
        imgui.push_id(str(descriptor.key))
        r, g, b = descriptor.label_color
        imgui.push_style_color(imgui.COLOR_TEXT, float(r), float(g), float(b), 1.0)
        try:
            return fn(descriptor)
        finally:
            imgui.pop_style_color(1)
            imgui.pop_id()

    def _slider(self, descriptor: ControlDescriptor) -> float | None:
        imgui = self._imgui
        lo, hi = descriptor.bounds
        w, _h = descriptor.size
        r, g, b = descriptor.color
        imgui.push_style_color(imgui.COLOR_FRAME_BACKGROUND, float(r), float(g), float(b), 1.0)
        imgui.push_item_width(float(w))
        try:
            changed, value = imgui.slider_float(
                f"{descriptor.label}##value",
                float(descriptor.value),
                float(lo),
                float(hi),
                format=_slider_format(descriptor),
            )
        finally:
            imgui.pop_item_width()
            imgui.pop_style_color(1)
        if not changed:
            return None
        return float(value)

    def _button(self, descriptor: ControlDescriptor) -> bool | None:
        imgui = self._imgui
        w, h = descriptor.size
        r, g, b = descriptor.color
        imgui.push_style_color(imgui.COLOR_BUTTON, float(r), float(g), float(b), 1.0)
        try:
            clicked = imgui.button(str(descriptor.label), width=float(w), height=float(h))
        finally:
            imgui.pop_style_color(1)
        return True if clicked else None

    def _pad(self, descriptor: ControlDescriptor) -> tuple[float, float] | None:
        imgui = self._imgui
        w, h = descriptor.size
        bounds = descriptor.bounds
        imgui.text(str(descriptor.label))

        origin_vec = imgui.get_cursor_screen_pos()
        origin = (float(origin_vec[0]), float(origin_vec[1]))
        imgui.invisible_button("##pad", float(w), float(h))
        active = bool(imgui.is_item_active())

        draw_list = imgui.get_window_draw_list()
        r, g, b = descriptor.color
        draw_list.add_rect_filled(
            origin[0],
            origin[1],
            origin[0] + float(w),
            origin[1] + float(h),
            imgui.get_color_u32_rgba(float(r), float(g), float(b), 1.0),
        )

        out: tuple[float, float] | None = None
        value = descriptor.value
        if active:
            mouse = imgui.get_mouse_pos()
            out = pad_point_from_mouse(
                (float(mouse[0]), float(mouse[1])), origin, (float(w), float(h)), bounds
            )
            value = out

        mx, my = pad_marker_from_value(value, origin, (float(w), float(h)), bounds)
        lr, lg, lb = descriptor.label_color
        draw_list.add_circle_filled(
            mx,
            my,
            PAD_MARKER_RADIUS,
            imgui.get_color_u32_rgba(float(lr), float(lg), float(lb), 1.0),
        )
        return out
