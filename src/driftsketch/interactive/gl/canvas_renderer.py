# どこで: `src/driftsketch/interactive/gl/canvas_renderer.py`。
# 何を: Renderer プロトコルを ModernGL で実装する（永続キャンバス FBO + 三角形バッチ描画）。
# なぜ: フェード軌跡は前フレームの画素を残す必要があり、swap で内容が不定になる既定 framebuffer には描けないため。

from __future__ import annotations

import math

import moderngl
import numpy as np
from pyglet.window import Window

from driftsketch.core.random_field import RGB01
from driftsketch.interactive.gl import utils as render_utils
from driftsketch.interactive.gl.shader import Shader
from driftsketch.interactive.render_settings import RenderSettings

# 1 頂点 = in_vert(2f) + in_color(4f)。
_FLOATS_PER_VERTEX = 6


class CanvasRenderer:
    """キャンバス FBO へ描き、フレーム末尾で画面へ転送するレンダラー。"""

    def __init__(
        self,
        window: Window,
        settings: RenderSettings,
        # 初期 GPU メモリ確保量（既定: 1MB）。必要に応じて自動拡張。
        initial_reserve: int = 1024 * 1024,
    ) -> None:
        window.switch_to()
        self.ctx = moderngl.create_context(require=410)
        self.program = Shader.create_shader(self.ctx)
        self._initial_reserve = int(initial_reserve)
        self.vbo = self.ctx.buffer(reserve=self._initial_reserve, dynamic=True)
        self.vao = self._build_vao()

        self._canvas_w, self._canvas_h = settings.canvas_size
        # 射影行列はキャンバス寸法にのみ依存するため初期化時に一度設定する。
        projection = render_utils.build_projection(
            float(self._canvas_w),
            float(self._canvas_h),
        )
        self.program["projection"].write(projection.tobytes())
        self._overlay_quad = render_utils.rect_triangles(
            float(self._canvas_w), float(self._canvas_h)
        )

        self._canvas_tex: moderngl.Texture | None = None
        self.canvas_fbo: moderngl.Framebuffer | None = None
        self._pending: list[np.ndarray] = []

    def _build_vao(self) -> moderngl.VertexArray:
        return self.ctx.vertex_array(
            self.program,
            [(self.vbo, "2f 4f", "in_vert", "in_color")],
        )

    # ---------- フレーム境界 ----------
    def begin_frame(self, framebuffer_size: tuple[int, int]) -> None:
        """キャンバス FBO を（必要なら作り直して）描画先に設定する。"""

        fbo = self._ensure_canvas(framebuffer_size)
        fbo.use()
        self.ctx.enable(moderngl.BLEND)
        self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA

    def end_frame(self) -> None:
        """未送信の三角形を描き、キャンバスを画面へ転送する。"""

        self._flush()
        if self.canvas_fbo is None:
            return
        self.ctx.copy_framebuffer(self.ctx.screen, self.canvas_fbo)

    def _ensure_canvas(self, size: tuple[int, int]) -> moderngl.Framebuffer:
        w, h = max(1, int(size[0])), max(1, int(size[1]))
        fbo = self.canvas_fbo
        if fbo is not None and fbo.size == (w, h):
            return fbo
        if fbo is not None:
            fbo.release()
        if self._canvas_tex is not None:
            self._canvas_tex.release()
        self._canvas_tex = self.ctx.texture((w, h), 4)
        fbo = self.ctx.framebuffer(color_attachments=[self._canvas_tex])
        fbo.clear(0.0, 0.0, 0.0, 1.0)
        self.canvas_fbo = fbo
        return fbo

    # ---------- Renderer プロトコル ----------
    def draw_background(self, color: RGB01) -> None:
        """キャンバス全体を不透明色でクリアする。"""

        self._flush()
        r, g, b = color
        fbo = self.canvas_fbo
        if fbo is None:
            raise RuntimeError("begin_frame() の前に描画はできません")
        fbo.clear(float(r), float(g), float(b), 1.0)

    def draw_fade_overlay(self, alpha: float = 0.05) -> None:
        """キャンバス全体へ半透明の黒い矩形を重ねる。"""

        a = float(alpha)
        if not (0.0 <= a <= 1.0):
            raise ValueError(f"alpha は 0..1 である必要があります: got={alpha!r}")
        self._flush()
        self._pending.append(_with_color(self._overlay_quad, (0.0, 0.0, 0.0), a))
        self._flush()

    def draw_ellipse(
        self,
        center: tuple[float, float],
        radius: float,
        color: RGB01,
        resolution: int | None = None,
        rotation: float = 0.0,
    ) -> None:
        """円/正多角形を描画キューへ積む（描画は flush 時にまとめて行う）。"""

        r = float(radius)
        if not math.isfinite(r) or r < 0.0:
            raise ValueError(f"radius は 0 以上の有限値である必要があります: got={radius!r}")
        n = render_utils.default_resolution(r) if resolution is None else int(resolution)
        tris = render_utils.polygon_triangles(center, r, n, rotation)
        self._pending.append(_with_color(tris, color, 1.0))

    def draw_ellipses(
        self,
        centers: np.ndarray,
        radii: np.ndarray,
        colors: np.ndarray,
        resolution: int | None = None,
    ) -> None:
        """N 個の円を 1 回の配列演算で描画キューへ積む（入力順に重なる）。

        `resolution=None` の場合は最大半径から 1 つの分割数を決め、全円で共有する。
        """

        c = np.asarray(centers, dtype=np.float64).reshape(-1, 2)
        r = np.asarray(radii, dtype=np.float64).reshape(-1)
        rgb = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
        count = c.shape[0]
        if r.shape[0] != count or rgb.shape[0] != count:
            raise ValueError(
                f"centers/radii/colors の個数が一致しません: {count}, {r.shape[0]}, {rgb.shape[0]}"
            )
        if count == 0:
            return
        if not np.all(np.isfinite(r)) or np.any(r < 0.0):
            raise ValueError("radii は 0 以上の有限値である必要があります")

        n = (
            render_utils.default_resolution(float(r.max()))
            if resolution is None
            else int(resolution)
        )
        tris = render_utils.ellipse_batch_triangles(c, r, n)
        out = np.empty((tris.shape[0], _FLOATS_PER_VERTEX), dtype=np.float32)
        out[:, 0:2] = tris
        out[:, 2:5] = np.repeat(rgb, n * 3, axis=0)
        out[:, 5] = 1.0
        self._pending.append(out)

    # ---------- バッファ操作 ----------
    def _ensure_capacity(self, nbytes: int) -> None:
        """データが大きくなったら GPU のバッファを再確保"""
        if nbytes <= self.vbo.size:
            return
        self.vbo.release()
        self.vbo = self.ctx.buffer(reserve=max(nbytes, self._initial_reserve), dynamic=True)
        # VAO は VBO が差し替わるときだけ張り直す。
        self.vao.release()
        self.vao = self._build_vao()

    def _flush(self) -> None:
        if not self._pending:
            return
        data = np.ascontiguousarray(np.concatenate(self._pending), dtype=np.float32)
        self._pending.clear()
        self._ensure_capacity(int(data.nbytes))
        self.vbo.orphan()
        self.vbo.write(data)
        self.vao.render(mode=moderngl.TRIANGLES, vertices=int(data.shape[0]))

    def release(self) -> None:
        """GPU リソースを解放する。"""
        self._pending.clear()
        if self.canvas_fbo is not None:
            self.canvas_fbo.release()
        if self._canvas_tex is not None:
            self._canvas_tex.release()
        self.vao.release()
        self.vbo.release()
        self.program.release()
        self.ctx.release()


def _with_color(vertices: np.ndarray, color: RGB01, alpha: float) -> np.ndarray:
    """(N, 2) 頂点へ RGBA を付けた (N, 6) float32 配列を返す。"""

    r, g, b = color
    out = np.empty((vertices.shape[0], _FLOATS_PER_VERTEX), dtype=np.float32)
    out[:, 0:2] = vertices
    out[:, 2:6] = (float(r), float(g), float(b), float(alpha))
    return out
