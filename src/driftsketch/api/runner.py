"""
どこで: `src/driftsketch/api/runner.py`。公開 API のランナー実装。
何を: pyglet + ModernGL (+ pyimgui) で各スケッチ（粒子 / コントロールパネル / 回転円）を起動するランナーを提供する。
なぜ: `sketch/*.py` を実行するだけで実際に描画をプレビューできる経路を用意するため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pyglet

from driftsketch.core.animation import AnimationLoop
from driftsketch.core.controls import ControlState, ReactiveControlPanel
from driftsketch.core.particle_system import (
    CANVAS_SIZE_DEFAULT,
    MotionStrategy,
    ParticleSystem,
)
from driftsketch.core.runtime_config import runtime_config, set_config_path
from driftsketch.core.views import (
    draw_control_shape,
    draw_particle_batch,
    draw_revolving_circles,
)
from driftsketch.interactive.render_settings import RenderSettings
from driftsketch.interactive.runtime.canvas_window_system import CanvasWindowSystem
from driftsketch.interactive.runtime.window_loop import MultiWindowLoop, WindowTask

_logger = logging.getLogger(__name__)

# DEBUG ログのフレーム進捗は毎フレームではなく、この間隔でだけ出す。
PROGRESS_LOG_INTERVAL_FRAMES = 600

SHAPE_CANVAS_SIZE_DEFAULT: tuple[int, int] = (1024, 768)


def _prepare(config_path: str | Path | None) -> None:
    """config を確定し、ログレベルと pyglet オプションを設定する。"""

    set_config_path(config_path)
    cfg = runtime_config()
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(cfg.log_level)

    # pyglet の Window 作成前にオプションを設定する。
    # True にすると GUI のクリックやドラッグが抜ける事がある。
    pyglet.options["vsync"] = False


def _close_all(closers: list[Callable[[], None]]) -> None:
    """作成順の逆でサブシステムを閉じる（1 つの失敗で残りを取りこぼさない）。"""

    for close in reversed(closers):
        try:
            close()
        except Exception:
            _logger.exception("Failed to close subsystem: %r", close)


def _open_canvas(
    anim: AnimationLoop,
    settings: RenderSettings,
    *,
    location: tuple[int, int],
    closers: list[Callable[[], None]],
) -> CanvasWindowSystem:
    """描画ウィンドウを作り、closers へ登録してから配置する。"""

    canvas = CanvasWindowSystem(anim, settings=settings)
    closers.append(canvas.close)
    canvas.window.set_location(*location)
    return canvas


def _run_tasks(
    tasks: list[WindowTask],
    closers: list[Callable[[], None]],
    *,
    fps: float,
    on_frame_start: Callable[[], None] | None = None,
) -> None:
    loop = MultiWindowLoop(tasks, fps=fps, on_frame_start=on_frame_start)
    try:
        loop.run()
    finally:
        # 例外でも確実に後始末する。
        _close_all(closers)


def run_particles(
    *,
    n: int = 2000,
    canvas_size: tuple[int, int] = CANVAS_SIZE_DEFAULT,
    strategy: MotionStrategy | str = MotionStrategy.JIGGLE,
    seed: int | None = None,
    fps: float = 60.0,
    render_scale: float = 1.0,
    config_path: str | Path | None = None,
) -> None:
    """粒子ドリフトのスケッチを起動する。

    Parameters
    ----------
    n : int
        粒子数。
    canvas_size : tuple[int, int]
        キャンバス寸法（原点は中心）。ウィンドウサイズにも使う。
    strategy : MotionStrategy | str
        `"jiggle"`（既定）または `"coherent_noise"`。
    seed : int | None
        初期配置・乱数・ノイズ場の seed。
    fps : float
        目標フレームレート。`<=0` の場合は可能な限り速く回す。
    render_scale : float
        キャンバス寸法に掛けるピクセル倍率。
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。
    """

    _prepare(config_path)
    cfg = runtime_config()

    motion = MotionStrategy(strategy)
    system = ParticleSystem.initialize(
        n, canvas_size=canvas_size, strategy=motion, seed=seed
    )
    _logger.info(
        "Particle sketch starting: n=%d canvas=%s strategy=%s", len(system), canvas_size, motion.value
    )

    anim = AnimationLoop(
        update=system.update,
        # render には毎フレームの配列コピーを渡し、描画側に状態を保持させない。
        view=lambda renderer, frame_index: draw_particle_batch(
            renderer, system.positions, system.colors, system.radii, frame_index
        ),
    )

    def on_frame_start() -> None:
        anim.tick()
        if anim.frame_index % PROGRESS_LOG_INTERVAL_FRAMES == 0:
            _logger.debug("frame %d: %d particles", anim.frame_index, len(system))

    settings = RenderSettings(
        canvas_size=canvas_size, render_scale=render_scale, caption="Particles"
    )
    closers: list[Callable[[], None]] = []
    try:
        canvas = _open_canvas(anim, settings, location=cfg.window_pos_draw, closers=closers)
    except Exception:
        _close_all(closers)
        raise

    _run_tasks(
        [WindowTask(window=canvas.window, draw_frame=canvas.draw_frame)],
        closers,
        fps=fps,
        on_frame_start=on_frame_start,
    )
    _logger.info("Particle sketch finished after %d frames", anim.frame_index)


def run_control_panel(
    *,
    initial_state: ControlState | None = None,
    canvas_size: tuple[int, int] = SHAPE_CANVAS_SIZE_DEFAULT,
    seed: int | None = None,
    fps: float = 60.0,
    config_path: str | Path | None = None,
) -> None:
    """スライダー/ボタン/XY パッドで n 角形を操作するスケッチを起動する。

    コントロールパネルは別ウィンドウで表示する。毎フレーム、パネルの更新を終えてから図形を描く。
    """

    _prepare(config_path)
    cfg = runtime_config()

    # GUI は依存が重い（pyimgui）ので、使うときだけ遅延 import する。
    from driftsketch.interactive.runtime.control_panel_system import (
        ControlPanelWindowSystem,
    )

    panel = ReactiveControlPanel(initial_state, seed=seed)
    _logger.info("Control panel sketch starting: state=%s", panel.state)

    closers: list[Callable[[], None]] = []
    try:
        gui = ControlPanelWindowSystem(panel)
        closers.append(gui.close)
        gui.window.set_location(*cfg.window_pos_control_panel)

        anim = AnimationLoop(
            update=gui.update,
            view=lambda renderer, _frame_index: draw_control_shape(renderer, panel.state),
        )
        settings = RenderSettings(canvas_size=canvas_size, caption="Shape")
        canvas = _open_canvas(anim, settings, location=cfg.window_pos_draw, closers=closers)
    except Exception:
        _close_all(closers)
        raise

    # GUI ウィンドウの描画が tick（パネル更新）を兼ね、その後に図形ウィンドウを描く。
    tasks = [
        WindowTask(window=gui.window, draw_frame=anim.tick),
        WindowTask(window=canvas.window, draw_frame=canvas.draw_frame),
    ]
    _run_tasks(tasks, closers, fps=fps)
    _logger.info("Control panel sketch finished: state=%s", panel.state)


def run_revolving_circles(
    *,
    canvas_size: tuple[int, int] = SHAPE_CANVAS_SIZE_DEFAULT,
    num_circles: int = 8,
    fps: float = 60.0,
    config_path: str | Path | None = None,
) -> None:
    """原点の周りを回る円列のスケッチを起動する。"""

    _prepare(config_path)
    cfg = runtime_config()

    anim = AnimationLoop(
        update=lambda: None,
        view=lambda renderer, frame_index: draw_revolving_circles(
            renderer, frame_index, num_circles=num_circles
        ),
    )
    settings = RenderSettings(canvas_size=canvas_size, caption="Revolving circles")
    closers: list[Callable[[], None]] = []
    try:
        canvas = _open_canvas(anim, settings, location=cfg.window_pos_draw, closers=closers)
    except Exception:
        _close_all(closers)
        raise

    _run_tasks(
        [WindowTask(window=canvas.window, draw_frame=canvas.draw_frame)],
        closers,
        fps=fps,
        on_frame_start=anim.tick,
    )
