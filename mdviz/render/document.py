"""
文档渲染器

把 Markdown 文档渲染为 HTML，按源文本整体缓存，并按代码块文本缓存图表输出
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from jinja2 import Template

from ..config import RenderConfig
from ..diagram import (
    ForceDiagramRenderer,
    FunctionPlotAdapter,
    FunctionPlotRenderer,
    MatplotlibPlotEngine,
)
from ..models import Block
from ..utils.diagnostics import DiagnosticChannel, diagnostics as default_diagnostics
from .dispatcher import BlockDispatcher
from .markdown import DocumentEngine, MarkdownItEngine


# 默认 HTML 页面模板
DEFAULT_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{{ title }}</title>
    <style>
        body {
            max-width: 48rem;
            margin: 2rem auto;
            padding: 0 1rem;
            font-family: system-ui, sans-serif;
            line-height: 1.6;
            color: #111827;
        }
        pre {
            background: #f3f4f6;
            padding: 0.75rem;
            border-radius: 0.375rem;
            overflow-x: auto;
        }
        table {
            border-collapse: collapse;
        }
        th, td {
            border: 1px solid #e5e7eb;
            padding: 0.25rem 0.75rem;
        }
        .mdviz-diagram {
            margin: 1.5rem 0;
            border: 1px solid #e5e7eb;
            border-radius: 0.5rem;
            overflow: hidden;
        }
        .mdviz-function-plot {
            background: #ffffff;
            padding: 0.5rem;
        }
        .mdviz-force {
            display: flex;
            justify-content: center;
            background: #f9fafb;
            padding: 1rem;
        }
    </style>
</head>
<body>
{{ body | safe }}
</body>
</html>
"""


class BlockMemo:
    """
    代码块输出缓存

    以 (类名, 原始文本) 为键。只保留最近一次渲染中出现过的块，
    文本未变的块直接复用上次的输出，不再调用绘图引擎。
    """

    def __init__(self):
        self._previous: dict[tuple[str | None, str], str] = {}
        self._current: dict[tuple[str | None, str], str] = {}
        self.hits = 0
        self.misses = 0

    def begin_pass(self) -> None:
        self._current = {}
        self.hits = 0
        self.misses = 0

    def resolve(self, block: Block, render: Callable[[Block], str]) -> str:
        key = (block.class_name, block.raw)
        if key in self._current:
            self.hits += 1
            return self._current[key]
        if key in self._previous:
            self.hits += 1
            output = self._previous[key]
        else:
            self.misses += 1
            output = render(block)
        self._current[key] = output
        return output

    def end_pass(self) -> None:
        self._previous = self._current
        self._current = {}

    def __len__(self) -> int:
        return len(self._previous)


class DocumentRenderer:
    """
    文档渲染器

    源文本不变时不重新解析；代码块文本不变时不重新绘图
    """

    def __init__(
        self,
        config: RenderConfig | None = None,
        engine: DocumentEngine | None = None,
        dispatcher: BlockDispatcher | None = None,
        channel: DiagnosticChannel | None = None,
    ):
        """
        初始化渲染器

        Args:
            config: 渲染配置
            engine: 文档解析引擎，默认 markdown-it
            dispatcher: 代码块分发器，默认按配置构造
            channel: 诊断通道
        """
        self.config = config or RenderConfig()
        if channel is None:
            channel = DiagnosticChannel(quiet=True) if self.config.quiet else default_diagnostics
        self.channel = channel
        self.engine = engine or MarkdownItEngine()
        self.dispatcher = dispatcher or self._default_dispatcher()
        self.memo = BlockMemo()
        self.passes = 0
        self._source: str | None = None
        self._html = ""

    def _default_dispatcher(self) -> BlockDispatcher:
        adapter = FunctionPlotAdapter(
            engine=MatplotlibPlotEngine(samples=self.config.plot_samples),
            channel=self.channel,
        )
        return BlockDispatcher(
            function_plot=FunctionPlotRenderer(
                adapter=adapter,
                channel=self.channel,
                plot_format=self.config.plot_format,
                dpi=self.config.plot_dpi,
            ),
            force_diagram=ForceDiagramRenderer(channel=self.channel),
        )

    def render(self, text: str) -> str:
        """
        渲染文档为 HTML 片段

        Args:
            text: Markdown 源文本

        Returns:
            HTML 片段
        """
        if text == self._source:
            return self._html

        self.memo.begin_pass()
        html = self.engine.parse_document(text, self._handle_block)
        self.memo.end_pass()

        self._source = text
        self._html = html
        self.passes += 1
        return html

    def _handle_block(self, class_name: str | None, raw: str, line: int | None = None) -> str:
        block = Block.from_code_element(class_name, raw, line)
        return self.memo.resolve(block, self.dispatcher.dispatch)

    def render_page(self, text: str, title: str | None = None) -> str:
        """渲染为完整的 HTML 页面"""
        template = Template(DEFAULT_PAGE_TEMPLATE, autoescape=True)
        return template.render(
            title=title or self.config.page_title,
            body=self.render(text),
        )

    def render_to_file(
        self,
        input_path: str | Path,
        output_path: str | Path,
        title: str | None = None,
    ) -> Path:
        """
        读取 Markdown 文件，渲染并保存为 HTML 页面

        Args:
            input_path: Markdown 文件路径
            output_path: 输出文件路径
            title: 页面标题，默认使用配置中的标题

        Returns:
            输出文件路径
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        text = Path(input_path).read_text(encoding="utf-8")
        page = self.render_page(text, title)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(page)

        return output_path
