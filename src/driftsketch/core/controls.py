# どこで: `src/driftsketch/core/controls.py`。
# 何を: 図形パラメータ（ControlState）と、毎 tick 作り直すコントロール記述子・入力リデューサを提供する。
# なぜ: immediate-mode GUI との往復を「state→記述子」「記述子+入力→差分」の純粋関数に分け、GUI 無しで検証できるようにするため。

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping

import numpy as np

from .protocols import WidgetHost
from .random_field import RGB01, make_rng, random_rgb01

NUM_SIDES_RANGE: tuple[int, int] = (3, 15)
SCALE_RANGE: tuple[float, float] = (10.0, 500.0)
ROTATION_RANGE: tuple[float, float] = (-math.pi, math.pi)
SPACE_MAX_X = 300.0
SPACE_MAX_Y = 300.0

SLIDER_SIZE: tuple[float, float] = (200.0, 30.0)
BUTTON_SIZE: tuple[float, float] = (100.0, 60.0)
PAD_SIZE: tuple[float, float] = (200.0, 200.0)
WIDGET_RGB: RGB01 = (0.3, 0.3, 0.3)
LABEL_RGB: RGB01 = (1.0, 1.0, 1.0)
LABEL_FONT_SIZE = 15

ControlDelta = Mapping[str, Any]


def _clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else hi if value > hi else value


def _finite_float(value: Any) -> float | None:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v):
        return None
    return v


def _finite_or(value: Any, fallback: float) -> float:
    """有限の数値ならそれを、そうでなければ fallback を返す。"""

    v = _finite_float(value)
    return float(fallback) if v is None else v


def _finite_components(value: Any, fallback: tuple[float, ...]) -> tuple[float, ...]:
    """要素ごとに `_finite_or` を適用する。長さが合わない/反復できない値は fallback のまま。"""

    try:
        items = tuple(value)
    except TypeError:
        return tuple(fallback)
    if len(items) != len(fallback):
        return tuple(fallback)
    return tuple(_finite_or(v, f) for v, f in zip(items, fallback))


_DEFAULT_NUM_SIDES = 5
_DEFAULT_SCALE = 200.0
_DEFAULT_ROTATION = 0.0
_DEFAULT_COLOR: RGB01 = (1.0, 0.0, 1.0)
_DEFAULT_POSITION: tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True, slots=True)
class ControlState:
    """図形パラメータ。各フィールドは常に定義域内に収まる。

    範囲外の値は端へクランプし、NaN/inf などの非有限値は既定値に置き換える。
    """

    num_sides: int = _DEFAULT_NUM_SIDES
    scale: float = _DEFAULT_SCALE
    rotation: float = _DEFAULT_ROTATION
    color: RGB01 = _DEFAULT_COLOR
    position: tuple[float, float] = _DEFAULT_POSITION

    def __post_init__(self) -> None:
        # frozen のため object.__setattr__ で正規化済みの値を書き戻す。
        lo, hi = NUM_SIDES_RANGE
        sides = _finite_or(self.num_sides, _DEFAULT_NUM_SIDES)
        object.__setattr__(self, "num_sides", int(_clamp(int(sides), lo, hi)))
        scale = _finite_or(self.scale, _DEFAULT_SCALE)
        object.__setattr__(self, "scale", float(_clamp(scale, *SCALE_RANGE)))
        rotation = _finite_or(self.rotation, _DEFAULT_ROTATION)
        object.__setattr__(self, "rotation", float(_clamp(rotation, *ROTATION_RANGE)))

        r, g, b = _finite_components(self.color, _DEFAULT_COLOR)
        object.__setattr__(
            self,
            "color",
            (_clamp(r, 0.0, 1.0), _clamp(g, 0.0, 1.0), _clamp(b, 0.0, 1.0)),
        )
        x, y = _finite_components(self.position, _DEFAULT_POSITION)
        object.__setattr__(
            self,
            "position",
            (
                _clamp(x, -SPACE_MAX_X, SPACE_MAX_X),
                _clamp(y, -SPACE_MAX_Y, SPACE_MAX_Y),
            ),
        )


class ControlKind(str, Enum):
    SLIDER = "slider"
    BUTTON = "button"
    PAD = "pad"


@dataclass(frozen=True, slots=True)
class ControlDescriptor:
    """1 tick 限りのコントロール記述子。

    `bounds` は slider なら `(min, max)`、pad なら `((xmin, xmax), (ymin, ymax))`、button は None。
    """

    key: str
    kind: ControlKind
    label: str
    value: Any = None
    bounds: Any = None
    size: tuple[float, float] = SLIDER_SIZE
    color: RGB01 = WIDGET_RGB
    label_color: RGB01 = LABEL_RGB
    label_font_size: int = LABEL_FONT_SIZE
    border: float = 0.0


def build_descriptors(state: ControlState) -> tuple[ControlDescriptor, ...]:
    """現在の ControlState から、このフレームに表示するコントロール記述子列を作る。"""

    sides_lo, sides_hi = NUM_SIDES_RANGE
    return (
        ControlDescriptor(
            key="num_sides",
            kind=ControlKind.SLIDER,
            label="N-gon",
            value=float(state.num_sides),
            bounds=(float(sides_lo), float(sides_hi)),
        ),
        ControlDescriptor(
            key="scale",
            kind=ControlKind.SLIDER,
            label="Scale",
            value=float(state.scale),
            bounds=SCALE_RANGE,
        ),
        ControlDescriptor(
            key="rotation",
            kind=ControlKind.SLIDER,
            label="Rotation",
            value=float(state.rotation),
            bounds=ROTATION_RANGE,
        ),
        ControlDescriptor(
            key="color",
            kind=ControlKind.BUTTON,
            label="Random\nColor",
            value=state.color,
            size=BUTTON_SIZE,
            border=1.0,
        ),
        ControlDescriptor(
            key="position",
            kind=ControlKind.PAD,
            label="Position",
            value=state.position,
            bounds=((-SPACE_MAX_X, SPACE_MAX_X), (-SPACE_MAX_Y, SPACE_MAX_Y)),
            size=PAD_SIZE,
        ),
    )


def reduce_input(
    descriptor: ControlDescriptor,
    user_input: Any | None,
    *,
    rng: np.random.Generator,
) -> dict[str, Any]:
    """記述子と（あれば）ユーザー入力から ControlState への差分を返す。

    Parameters
    ----------
    descriptor : ControlDescriptor
        入力を受けたコントロール。
    user_input : Any | None
        slider は数値、button はクリック（truthy）、pad は `(x, y)`。None は入力なし。
    rng : np.random.Generator
        color ボタンの再抽選に使う乱数生成器。

    Returns
    -------
    dict[str, Any]
        変更するフィールド名→生の値。入力なし/不正値なら空 dict。
    """

    if user_input is None:
        return {}

    kind = descriptor.kind
    if kind is ControlKind.SLIDER:
        v = _finite_float(user_input)
        if v is None:
            return {}
        return {descriptor.key: v}

    if kind is ControlKind.BUTTON:
        if not user_input:
            return {}
        return {descriptor.key: random_rgb01(rng)}

    if kind is ControlKind.PAD:
        try:
            raw_x, raw_y = user_input
        except (TypeError, ValueError):
            return {}
        x = _finite_float(raw_x)
        y = _finite_float(raw_y)
        if x is None or y is None:
            return {}
        return {descriptor.key: (x, y)}

    raise ValueError(f"unknown control kind: {kind!r}")


def apply_delta(state: ControlState, delta: ControlDelta) -> ControlState:
    """差分を適用した ControlState を返す。

    値は各定義域へクランプされる。非有限値（要素）は捨て、そのフィールドは直前の値を保つ。
    """

    if not delta:
        return state
    changes: dict[str, Any] = {}
    for key, value in delta.items():
        prior = getattr(state, key, None)
        if isinstance(prior, tuple):
            changes[key] = _finite_components(value, prior)
        elif prior is not None:
            changes[key] = _finite_or(value, prior)
        else:
            # 未知のフィールドは replace() に TypeError を出させる。
            changes[key] = value
    return replace(state, **changes)


class ReactiveControlPanel:
    """ControlState を唯一の正とし、毎 tick GUI と同期する。"""

    def __init__(
        self,
        state: ControlState | None = None,
        *,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._state = ControlState() if state is None else state
        self._rng = make_rng(seed) if rng is None else rng

    @property
    def state(self) -> ControlState:
        return self._state

    def update(self, host: WidgetHost) -> ControlState:
        """記述子を作り直して host へ渡し、返ってきた入力を state へ畳み込む。

        記述子は毎回 state から作り直すため、表示値と state はずれない。
        各記述子は自分のフィールドだけを表すので、同じ tick 内の入力順に依存しない。
        """

        for descriptor in build_descriptors(self._state):
            user_input = host.submit(descriptor)
            delta = reduce_input(descriptor, user_input, rng=self._rng)
            self._state = apply_delta(self._state, delta)
        return self._state


__all__ = [
    "ControlDelta",
    "ControlDescriptor",
    "ControlKind",
    "ControlState",
    "ReactiveControlPanel",
    "apply_delta",
    "build_descriptors",
    "reduce_input",
]
