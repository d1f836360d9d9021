# どこで: `src/driftsketch/core/__init__.py`。
# 何を: GUI/GL に依存しないスケッチ本体（乱数・粒子・コントロール・ループ）をまとめるパッケージ定義。
# なぜ: ヘッドレスでテストできる層を interactive 層から分離しておくため。

from __future__ import annotations

__all__ = []
