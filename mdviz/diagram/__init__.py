"""
图表模块

受力图（svgwrite）与函数图像（matplotlib）
"""

from .force import ForceDiagramRenderer
from .function_plot import (
    FunctionPlotAdapter,
    FunctionPlotRenderer,
    MatplotlibPlotEngine,
    PlotEngine,
    PlotOptions,
    PlotSeries,
    PlotSurface,
    check_domain,
    compile_expression,
)
from .geometry import SCALE, project, project_all

__all__ = [
    "ForceDiagramRenderer",
    "FunctionPlotAdapter",
    "FunctionPlotRenderer",
    "MatplotlibPlotEngine",
    "PlotEngine",
    "PlotOptions",
    "PlotSeries",
    "PlotSurface",
    "check_domain",
    "compile_expression",
    "SCALE",
    "project",
    "project_all",
]
