"""
数据模型模块
"""

from .blocks import Block, BlockKind, extract_language_tag
from .payload import (
    DEFAULT_DOMAIN,
    FORCE_RED,
    ForceVector,
    FunctionPlotSpec,
    VectorProjection,
)

__all__ = [
    "Block",
    "BlockKind",
    "extract_language_tag",
    "DEFAULT_DOMAIN",
    "FORCE_RED",
    "ForceVector",
    "FunctionPlotSpec",
    "VectorProjection",
]
