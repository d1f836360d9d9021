from pathlib import Path

import pytest

from driftsketch.core.runtime_config import set_config_path

# pyglet/moderngl は import 時に X11/GL の共有ライブラリを読むため、無い環境ではスキップする。
runner = pytest.importorskip("driftsketch.api.runner")
canvas_window_system = pytest.importorskip("driftsketch.interactive.runtime.canvas_window_system")


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    set_config_path(None)
    monkeypatch.setattr(runner, "_prepare", lambda _config_path: None)
    yield
    set_config_path(None)


class _BrokenWindow:
    def __init__(self) -> None:
        self.closed = False

    def set_location(self, _x: int, _y: int) -> None:
        raise RuntimeError("set_location failed")

    def close(self) -> None:
        self.closed = True


class _FakeCanvas:
    instances: list["_FakeCanvas"] = []

    def __init__(self, _loop, *, settings) -> None:
        self.window = _BrokenWindow()
        self.closed = False
        _FakeCanvas.instances.append(self)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_canvas(monkeypatch: pytest.MonkeyPatch) -> type[_FakeCanvas]:
    _FakeCanvas.instances = []
    monkeypatch.setattr(runner, "CanvasWindowSystem", _FakeCanvas)

    def _never_run(*_args, **_kwargs) -> None:
        raise AssertionError("loop must not start")

    monkeypatch.setattr(runner, "_run_tasks", _never_run)
    return _FakeCanvas


def test_run_particles_closes_canvas_when_placement_fails(fake_canvas):
    with pytest.raises(RuntimeError, match="set_location failed"):
        runner.run_particles(n=5, seed=0)
    assert [c.closed for c in fake_canvas.instances] == [True]


def test_run_revolving_circles_closes_canvas_when_placement_fails(fake_canvas):
    with pytest.raises(RuntimeError, match="set_location failed"):
        runner.run_revolving_circles()
    assert [c.closed for c in fake_canvas.instances] == [True]


def test_canvas_window_system_closes_window_when_renderer_fails(monkeypatch: pytest.MonkeyPatch):
    window = _BrokenWindow()
    monkeypatch.setattr(canvas_window_system, "create_draw_window", lambda _settings: window)

    def _no_gl(*_args, **_kwargs):
        raise RuntimeError("OpenGL 4.1 unavailable")

    monkeypatch.setattr(canvas_window_system, "CanvasRenderer", _no_gl)

    with pytest.raises(RuntimeError, match="OpenGL 4.1"):
        canvas_window_system.CanvasWindowSystem(
            object(), settings=canvas_window_system.RenderSettings()
        )
    assert window.closed
