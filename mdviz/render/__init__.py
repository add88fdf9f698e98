"""
渲染模块

负责代码块分发与 Markdown 文档渲染
"""

from .dispatcher import BlockDispatcher, render_plain
from .document import BlockMemo, DocumentRenderer
from .inspect import BlockReport, check_block, inspect_blocks
from .markdown import DocumentEngine, MarkdownItEngine

__all__ = [
    "BlockDispatcher",
    "render_plain",
    "BlockMemo",
    "DocumentRenderer",
    "BlockReport",
    "check_block",
    "inspect_blocks",
    "DocumentEngine",
    "MarkdownItEngine",
]
