"""
代码块分发器

按语言标签把代码块路由到函数图像、受力图或原样输出
"""

from __future__ import annotations

import html

from ..diagram import ForceDiagramRenderer, FunctionPlotRenderer
from ..models import Block, BlockKind


class BlockDispatcher:
    """
    代码块分发器

    无状态：输出只取决于 Block 本身
    """

    def __init__(
        self,
        function_plot: FunctionPlotRenderer | None = None,
        force_diagram: ForceDiagramRenderer | None = None,
    ):
        self.function_plot = function_plot or FunctionPlotRenderer()
        self.force_diagram = force_diagram or ForceDiagramRenderer()

    def dispatch(self, block: Block) -> str:
        """
        渲染单个代码块

        Args:
            block: 代码块

        Returns:
            HTML 片段
        """
        kind = block.kind
        if kind is BlockKind.FUNCTION_PLOT:
            return self.function_plot.render(block.content)
        if kind is BlockKind.FORCE_DIAGRAM:
            return self.force_diagram.render(block.content)
        if kind is BlockKind.PLAIN:
            return render_plain(block)
        raise AssertionError(f"未处理的代码块类型: {kind}")

    def __call__(self, class_name: str | None, raw: str, line: int | None = None) -> str:
        return self.dispatch(Block.from_code_element(class_name, raw, line))


def render_plain(block: Block) -> str:
    """原样输出代码，保留类名供样式使用"""
    attrs = f' class="{html.escape(block.class_name)}"' if block.class_name else ""
    return f"<pre><code{attrs}>{html.escape(block.raw, quote=False)}</code></pre>\n"
