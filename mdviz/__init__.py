"""
mdviz: 带图表的 Markdown 渲染器
将 plot-function / plot-force 代码块渲染为函数图像和受力图
"""

__version__ = "0.1.0"

from .models import Block, BlockKind, ForceVector, FunctionPlotSpec, VectorProjection
from .config import load_config, RenderConfig
from .diagram import ForceDiagramRenderer, FunctionPlotAdapter, FunctionPlotRenderer, project
from .render import BlockDispatcher, DocumentRenderer, MarkdownItEngine, inspect_blocks
from .utils import parse_force_payload, parse_function_payload

__all__ = [
    # 版本
    "__version__",
    # 模型
    "Block",
    "BlockKind",
    "ForceVector",
    "FunctionPlotSpec",
    "VectorProjection",
    # 配置
    "load_config",
    "RenderConfig",
    # 图表
    "ForceDiagramRenderer",
    "FunctionPlotAdapter",
    "FunctionPlotRenderer",
    "project",
    # 渲染
    "BlockDispatcher",
    "DocumentRenderer",
    "MarkdownItEngine",
    "inspect_blocks",
    # 载荷解析
    "parse_force_payload",
    "parse_function_payload",
]
