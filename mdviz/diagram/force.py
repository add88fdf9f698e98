"""
受力图渲染器

用 svgwrite 构造静态 SVG：坐标轴辅助线、中心物体、每个力一条带箭头和标签的线段
"""

from __future__ import annotations

import hashlib

import svgwrite

from ..models import ForceVector
from ..utils.diagnostics import DiagnosticChannel, diagnostics as default_diagnostics
from ..utils.payload import parse_force_payload
from .geometry import SCALE, project

# 画布边长与原点
SCENE_SIZE = 300
CENTER = SCENE_SIZE / 2

# 中心物体
BODY_SIZE = 40
BODY_COLOR = "#374151"  # gray-700

GUIDE_COLOR = "#e5e7eb"  # gray-200


def diagram_id(content: str) -> str:
    """由载荷文本生成短 id，同一页面上多张受力图的 marker 不会冲突"""
    return hashlib.sha1(content.encode("utf-8")).hexdigest()[:8]


class ForceDiagramRenderer:
    """
    受力图渲染器

    每次渲染都新建 Drawing 完整重建，不做增量修改
    """

    def __init__(self, channel: DiagnosticChannel | None = None, scale: float = SCALE):
        self.channel = channel or default_diagnostics
        self.scale = scale

    def render(self, content: str) -> str:
        """
        渲染 plot-force 代码块

        Args:
            content: 代码块文本

        Returns:
            包含内联 SVG 的 HTML 片段
        """
        forces = parse_force_payload(content, self.channel)
        svg = self.render_svg(forces, diagram_id(content))
        return f'<div class="mdviz-diagram mdviz-force">{svg}</div>\n'

    def render_svg(self, forces: list[ForceVector], scene_id: str = "scene") -> str:
        """生成受力图 SVG 文本；绘制力时出现意外错误则退化为空场景"""
        try:
            return self._build(forces, scene_id).tostring()
        except Exception as e:
            self.channel.error("plot-force", "绘制力失败，仅输出背景", e)
            return self._build([], scene_id).tostring()

    def _build(self, forces: list[ForceVector], scene_id: str) -> svgwrite.Drawing:
        # debug=False：颜色等属性原样透传，不做 SVG 语法校验
        dwg = svgwrite.Drawing(size=(SCENE_SIZE, SCENE_SIZE), debug=False)
        dwg.viewbox(0, 0, SCENE_SIZE, SCENE_SIZE)

        self._draw_guides(dwg)
        self._draw_body(dwg)
        for index, force in enumerate(forces):
            self._draw_force(dwg, force, index, scene_id)
        return dwg

    def _draw_guides(self, dwg: svgwrite.Drawing) -> None:
        dwg.add(dwg.line(
            start=(CENTER, 0),
            end=(CENTER, SCENE_SIZE),
            stroke=GUIDE_COLOR,
            stroke_width=2,
        ))
        dwg.add(dwg.line(
            start=(0, CENTER),
            end=(SCENE_SIZE, CENTER),
            stroke=GUIDE_COLOR,
            stroke_width=2,
        ))

    def _draw_body(self, dwg: svgwrite.Drawing) -> None:
        half = BODY_SIZE / 2
        dwg.add(dwg.rect(
            insert=(CENTER - half, CENTER - half),
            size=(BODY_SIZE, BODY_SIZE),
            fill=BODY_COLOR,
            rx=4,
        ))

    def _draw_force(
        self,
        dwg: svgwrite.Drawing,
        force: ForceVector,
        index: int,
        scene_id: str,
    ) -> None:
        """画一个力：每个力一个独立颜色的箭头 marker"""
        color = force.stroke
        point = project(force, CENTER, self.scale)

        marker = dwg.marker(
            insert=(9, 3.5),
            size=(10, 7),
            orient="auto",
            id=f"arrowhead-{scene_id}-{index}",
        )
        marker.add(dwg.polygon(points=[(0, 0), (10, 3.5), (0, 7)], fill=color))
        dwg.defs.add(marker)

        group = dwg.g(id=f"force-{scene_id}-{index}")
        group.add(dwg.line(
            start=(CENTER, CENTER),
            end=(point.end_x, point.end_y),
            stroke=color,
            stroke_width=3,
            marker_end=marker.get_funciri(),
        ))
        group.add(dwg.text(
            force.name,
            insert=(point.label_x, point.label_y),
            fill=color,
            font_size=14,
            font_weight="bold",
            text_anchor="middle",
        ))
        dwg.add(group)
