"""
代码块检查

逐个校验文档中的图表代码块，报告载荷错误和表达式错误，不做实际绘图
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from ..diagram import check_domain, compile_expression
from ..errors import ExternalEngineError, PayloadDecodeError, PayloadShapeError
from ..models import Block, BlockKind
from ..utils.payload import decode_force_payload, decode_function_payload
from .markdown import DocumentEngine, MarkdownItEngine

BlockStatus = Literal["ok", "decode-error", "shape-error", "engine-error"]


class BlockReport(BaseModel):
    """单个图表代码块的检查结果"""
    line: int | None = Field(default=None, description="起始行号")
    kind: BlockKind = Field(..., description="块类型")
    status: BlockStatus = Field(default="ok", description="检查结果")
    message: str = Field(default="", description="错误信息或摘要")

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def check_block(block: Block) -> BlockReport:
    """校验单个图表代码块"""
    report = BlockReport(line=block.line, kind=block.kind)
    try:
        if block.kind is BlockKind.FUNCTION_PLOT:
            spec = decode_function_payload(block.content)
            compile_expression(spec.fn)
            check_domain(spec.x_domain)
            report.message = f"y = {spec.fn}, x ∈ [{spec.x_domain[0]:g}, {spec.x_domain[1]:g}]"
        elif block.kind is BlockKind.FORCE_DIAGRAM:
            forces = decode_force_payload(block.content)
            report.message = f"{len(forces)} 个力"
    except PayloadDecodeError as e:
        report.status = "decode-error"
        report.message = str(e)
    except PayloadShapeError as e:
        report.status = "shape-error"
        report.message = str(e)
    except ExternalEngineError as e:
        report.status = "engine-error"
        report.message = str(e)
    return report


def inspect_blocks(text: str, engine: DocumentEngine | None = None) -> list[BlockReport]:
    """
    检查文档中所有图表代码块

    Args:
        text: Markdown 源文本
        engine: 解析引擎，默认 markdown-it

    Returns:
        按出现顺序排列的检查结果（普通代码块不在其中）
    """
    engine = engine or MarkdownItEngine()
    return [
        check_block(block)
        for block in engine.iter_code_blocks(text)
        if block.kind is not BlockKind.PLAIN
    ]
