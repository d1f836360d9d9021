import pytest

from driftsketch.core.animation import AnimationLoop


def test_update_runs_before_render_each_frame():
    events: list[tuple[str, int]] = []
    state = {"n": 0}

    def update() -> None:
        state["n"] += 1
        events.append(("update", state["n"]))

    def view(_renderer, frame_index: int) -> None:
        events.append(("render", state["n"]))
        assert frame_index == state["n"]

    loop = AnimationLoop(update=update, view=view)
    for _ in range(3):
        loop.tick()
        loop.render(object())

    assert events == [
        ("update", 1),
        ("render", 1),
        ("update", 2),
        ("render", 2),
        ("update", 3),
        ("render", 3),
    ]
    assert loop.frame_index == 3


def test_render_before_first_tick_raises():
    loop = AnimationLoop(update=lambda: None, view=lambda r, i: None)
    with pytest.raises(RuntimeError):
        loop.render(object())


def test_tick_during_render_raises():
    holder: dict[str, AnimationLoop] = {}

    def view(_renderer, _i: int) -> None:
        holder["loop"].tick()

    loop = AnimationLoop(update=lambda: None, view=view)
    holder["loop"] = loop
    loop.tick()
    with pytest.raises(RuntimeError):
        loop.render(object())
    assert loop.frame_index == 1


def test_render_is_not_reentrant():
    holder: dict[str, AnimationLoop] = {}

    def view(renderer, _i: int) -> None:
        holder["loop"].render(renderer)

    loop = AnimationLoop(update=lambda: None, view=view)
    holder["loop"] = loop
    loop.tick()
    with pytest.raises(RuntimeError):
        loop.render(object())

    # 失敗後はフラグが戻り、tick を続けられる。
    loop.tick()
    assert loop.frame_index == 2


def test_failed_update_does_not_advance_frame():
    def update() -> None:
        raise ValueError("boom")

    loop = AnimationLoop(update=update, view=lambda r, i: None)
    with pytest.raises(ValueError):
        loop.tick()
    assert loop.frame_index == 0


def test_tick_is_not_reentrant():
    holder: dict[str, AnimationLoop] = {}
    calls: list[int] = []

    def update() -> None:
        calls.append(len(calls))
        if len(calls) == 1:
            holder["loop"].tick()

    loop = AnimationLoop(update=update, view=lambda r, i: None)
    holder["loop"] = loop
    with pytest.raises(RuntimeError):
        loop.tick()
    assert calls == [0]
    assert loop.frame_index == 0

    # 失敗後はフラグが戻り、次の tick は通常どおり進む。
    loop.tick()
    assert loop.frame_index == 1
    assert len(calls) == 2


def test_render_during_tick_raises():
    holder: dict[str, AnimationLoop] = {}
    seen: list[type] = []

    def update() -> None:
        loop = holder["loop"]
        if loop.frame_index == 0:
            return
        try:
            loop.render(object())
        except RuntimeError as exc:
            seen.append(type(exc))
            raise

    loop = AnimationLoop(update=update, view=lambda r, i: None)
    holder["loop"] = loop
    loop.tick()
    with pytest.raises(RuntimeError):
        loop.tick()
    assert seen == [RuntimeError]
    assert loop.frame_index == 1
