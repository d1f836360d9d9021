# どこで: `src/driftsketch/interactive/__init__.py`。
# 何を: pyglet / moderngl / pyimgui に依存するライブ描画層のパッケージ定義。
# なぜ: 重い GUI 依存をこの層に閉じ込め、core をヘッドレスに保つため。

from __future__ import annotations

__all__ = []
