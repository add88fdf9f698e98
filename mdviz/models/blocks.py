"""
代码块数据模型：Block, BlockKind
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, Field

# 解析引擎为代码块附加的类名标注，如 language-plot-force
LANGUAGE_CLASS_PATTERN = re.compile(r"language-([\w-]+)")


class BlockKind(str, Enum):
    """代码块类型"""
    PLAIN = "plain"                   # 普通代码，原样输出
    FUNCTION_PLOT = "plot-function"   # 函数图像
    FORCE_DIAGRAM = "plot-force"      # 受力图

    @classmethod
    def from_tag(cls, tag: str) -> BlockKind:
        """根据语言标签解析块类型，未识别的标签一律视为普通代码"""
        if tag == cls.FUNCTION_PLOT.value:
            return cls.FUNCTION_PLOT
        if tag == cls.FORCE_DIAGRAM.value:
            return cls.FORCE_DIAGRAM
        return cls.PLAIN


def extract_language_tag(class_name: str | None) -> str:
    """从 language-<identifier> 形式的类名中提取语言标签"""
    match = LANGUAGE_CLASS_PATTERN.search(class_name or "")
    return match.group(1) if match else ""


class Block(BaseModel):
    """单个代码块，一次渲染过程内不可变"""
    language_tag: str = Field(default="", description="语言标签，缺失时为空串")
    content: str = Field(..., description="块内原始文本（去掉末尾一个换行）")
    class_name: str | None = Field(default=None, description="解析引擎附加的类名")
    raw: str = Field(default="", description="未经处理的块文本")
    line: int | None = Field(default=None, description="起始行号（从 1 开始）")

    model_config = {"frozen": True}

    @classmethod
    def from_code_element(
        cls,
        class_name: str | None,
        raw: str,
        line: int | None = None,
    ) -> Block:
        """由解析引擎交给我们的 (类名, 文本) 构造 Block"""
        content = raw[:-1] if raw.endswith("\n") else raw
        return cls(
            language_tag=extract_language_tag(class_name),
            content=content,
            class_name=class_name,
            raw=raw,
            line=line,
        )

    @property
    def kind(self) -> BlockKind:
        return BlockKind.from_tag(self.language_tag)
