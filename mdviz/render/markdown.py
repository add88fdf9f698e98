"""
Markdown 解析引擎

封装 markdown-it-py：GFM 表格 / 删除线 / 自动链接、$ 数学公式，代码块交给外部处理函数
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterator

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from mdit_py_plugins.dollarmath import dollarmath_plugin

from ..models import Block

# (类名, 原始文本, 行号) -> HTML
BlockHandler = Callable[[str | None, str, int | None], str]

# GFM 扩展：表格、删除线、裸 URL 自动链接
GFM_RULES = ["table", "strikethrough", "linkify"]


class DocumentEngine(ABC):
    """文档解析引擎抽象基类"""

    @abstractmethod
    def parse_document(self, text: str, block_handler: BlockHandler) -> str:
        """
        解析并渲染文档

        Args:
            text: 文档源文本
            block_handler: 每遇到一个代码块调用一次，返回该块的 HTML

        Returns:
            HTML 片段
        """
        pass

    @abstractmethod
    def iter_code_blocks(self, text: str) -> Iterator[Block]:
        """按出现顺序列出文档中的代码块"""
        pass


class MarkdownItEngine(DocumentEngine):
    """基于 markdown-it-py 的解析引擎"""

    def __init__(self):
        # linkify 规则需要同时打开 linkify 选项
        self.md = MarkdownIt("commonmark", {"linkify": True}).enable(GFM_RULES)
        # $...$ 与 $$...$$ 以 HTML 标记输出，交给页面端排版
        self.md.use(dollarmath_plugin)

        self.md.renderer.rules["fence"] = self._render_fence
        self.md.renderer.rules["code_block"] = self._render_code_block

    def parse_document(self, text: str, block_handler: BlockHandler) -> str:
        return self.md.render(text, {"block_handler": block_handler})

    def iter_code_blocks(self, text: str) -> Iterator[Block]:
        for token in self.md.parse(text):
            if token.type == "fence":
                yield Block.from_code_element(
                    self._class_name(token.info, self.md.options.langPrefix),
                    token.content,
                    self._line(token),
                )
            elif token.type == "code_block":
                yield Block.from_code_element(None, token.content, self._line(token))

    def _render_fence(self, tokens, idx, options, env) -> str:
        token = tokens[idx]
        class_name = self._class_name(token.info, options.langPrefix)
        return env["block_handler"](class_name, token.content, self._line(token))

    def _render_code_block(self, tokens, idx, options, env) -> str:
        token = tokens[idx]
        return env["block_handler"](None, token.content, self._line(token))

    @staticmethod
    def _class_name(info: str, prefix: str) -> str | None:
        """与 markdown-it 默认渲染一致：info 的第一个词加上 language- 前缀"""
        info = unescapeAll(info).strip() if info else ""
        if not info:
            return None
        return f"{prefix}{info.split(maxsplit=1)[0]}"

    @staticmethod
    def _line(token) -> int | None:
        return token.map[0] + 1 if token.map else None
