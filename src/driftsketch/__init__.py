# どこで: `src/driftsketch/__init__.py`。
# 何を: ルート `driftsketch` パッケージを定義する。
# なぜ: import 起点を `driftsketch` に統一するため。

from __future__ import annotations

from driftsketch.api import run_control_panel, run_particles, run_revolving_circles
from driftsketch.core.controls import ControlState, ReactiveControlPanel
from driftsketch.core.particle_system import MotionStrategy, ParticleSystem

__all__ = [
    "ControlState",
    "MotionStrategy",
    "ParticleSystem",
    "ReactiveControlPanel",
    "run_control_panel",
    "run_particles",
    "run_revolving_circles",
]
