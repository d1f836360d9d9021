import numpy as np
import pytest

from driftsketch.core.particle import Particle
from driftsketch.core.particle_system import MotionStrategy, ParticleSystem
from driftsketch.core.random_field import PALETTE


@pytest.mark.parametrize("n", [0, 1, 3, 250])
def test_initialize_creates_exactly_n_particles(n: int):
    system = ParticleSystem.initialize(n, seed=0)
    assert len(system) == n
    assert len(system.particles) == n
    assert system.positions.shape == (n, 2)


def test_initialize_radius_color_and_bounds():
    system = ParticleSystem.initialize(1000, canvas_size=(2048, 1400), seed=1)
    radii = system.radii
    assert np.all(radii >= 1.5) and np.all(radii <= 3.5)

    palette = set(PALETTE)
    for p in system.particles:
        assert p.color in palette

    pos = system.positions
    assert np.all(np.abs(pos[:, 0]) <= 1024.0)
    assert np.all(np.abs(pos[:, 1]) <= 700.0)


def test_initialize_rejects_negative_count():
    with pytest.raises(ValueError):
        ParticleSystem.initialize(-1)


def test_zero_updates_leave_positions_unchanged():
    system = ParticleSystem.initialize(10, seed=2)
    before = system.positions
    np.testing.assert_array_equal(system.positions, before)


def test_jiggle_displacement_per_tick_is_bounded():
    system = ParticleSystem.initialize(200, seed=3)
    assert system.strategy is MotionStrategy.JIGGLE
    prev = system.positions
    for _ in range(50):
        system.update()
        cur = system.positions
        delta = cur - prev
        assert np.all(np.abs(delta) <= 1.5)
        assert np.all(np.isfinite(cur))
        prev = cur


def test_end_to_end_three_particles_one_jiggle():
    system = ParticleSystem.initialize(3, seed=1234)
    before = system.particles
    system.update()
    after = system.particles

    assert len(after) == 3
    for p0, p1 in zip(before, after):
        assert abs(p1.position[0] - p0.position[0]) <= 1.5
        assert abs(p1.position[1] - p0.position[1]) <= 1.5
        assert np.all(np.isfinite(p1.position))
        assert p1.radius == p0.radius
        assert p1.color == p0.color


def test_same_seed_reproduces_run():
    a = ParticleSystem.initialize(20, seed=99)
    b = ParticleSystem.initialize(20, seed=99)
    for _ in range(5):
        a.update()
        b.update()
    np.testing.assert_array_equal(a.positions, b.positions)


def test_coherent_noise_displacement_matches_noise_field():
    system = ParticleSystem.initialize(
        50, seed=5, strategy=MotionStrategy.COHERENT_NOISE
    )
    before = system.positions
    system.update()
    delta = system.positions - before

    for (x, y), (dx, dy) in zip(before.tolist(), delta.tolist()):
        assert dx == pytest.approx(system.noise.noise((x, y), channel=0, scale=0.01), abs=1e-9)
        assert dy == pytest.approx(system.noise.noise((x, y), channel=1, scale=0.01), abs=1e-9)


def test_coherent_noise_is_static_in_time_for_same_position():
    positions = np.array([[10.0, 20.0], [10.0, 20.0]])
    colors = np.array([PALETTE[0], PALETTE[1]], dtype=np.uint8)
    radii = np.array([2.0, 2.0])
    system = ParticleSystem(
        positions, colors, radii, strategy=MotionStrategy.COHERENT_NOISE
    )
    first = system.displacements()
    second = system.displacements()
    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(first[0], first[1])


def test_positions_are_not_wrapped_or_clamped():
    positions = np.array([[5000.0, -5000.0]])
    system = ParticleSystem(positions, [PALETTE[0]], [2.0])
    system.update()
    x, y = system.particles[0].position
    assert abs(x - 5000.0) <= 1.5
    assert abs(y + 5000.0) <= 1.5


def test_snapshots_are_read_only():
    system = ParticleSystem.initialize(4, seed=6)
    pos = system.positions
    with pytest.raises(ValueError):
        pos[0, 0] = 1.0
    p = system.particles[0]
    assert isinstance(p, Particle)
    with pytest.raises(AttributeError):
        p.radius = 10.0  # type: ignore[misc]


def test_strategy_accepts_string_value():
    system = ParticleSystem.initialize(1, strategy="coherent_noise", seed=0)  # type: ignore[arg-type]
    assert system.strategy is MotionStrategy.COHERENT_NOISE


def test_mismatched_arrays_are_rejected():
    with pytest.raises(ValueError):
        ParticleSystem(np.zeros((2, 2)), [PALETTE[0]], [2.0, 2.0])
