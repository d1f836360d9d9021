"""
どこで: `sketch/particles.py`。
何を: 2000 個の粒子が軌跡を残しながら漂うスケッチを起動する。
なぜ: 粒子ドリフトの最小エントリポイントとして利用するため。
"""

from driftsketch import MotionStrategy, run_particles

N_PARTICLES = 2000
SCREEN_WIDTH = 2048
SCREEN_HEIGHT = 1400


if __name__ == "__main__":
    run_particles(
        n=N_PARTICLES,
        canvas_size=(SCREEN_WIDTH, SCREEN_HEIGHT),
        strategy=MotionStrategy.JIGGLE,
    )
