"""
どこで: `sketch/control_panel.py`。
何を: スライダー/ボタン/XY パッドで n 角形を操作するスケッチを起動する。
なぜ: ReactiveControlPanel の動作確認用エントリポイントとして利用するため。
"""

from driftsketch import ControlState, run_control_panel

if __name__ == "__main__":
    run_control_panel(
        initial_state=ControlState(
            num_sides=5,
            scale=200.0,
            rotation=0.0,
            color=(1.0, 0.0, 1.0),
            position=(0.0, 0.0),
        ),
    )
