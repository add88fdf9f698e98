"""
函数图像适配器

把 FunctionPlotSpec 交给绘图引擎（默认 matplotlib）画到调用方提供的画布上
"""

from __future__ import annotations

import base64
import io
import re
from abc import ABC, abstractmethod
from typing import Callable, Literal

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import sympy as sp  # noqa: E402
from pydantic import BaseModel, Field  # noqa: E402
from sympy.parsing.sympy_parser import (  # noqa: E402
    NAME,
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from ..errors import ExternalEngineError  # noqa: E402
from ..models import FunctionPlotSpec  # noqa: E402
from ..utils.diagnostics import DiagnosticChannel, diagnostics as default_diagnostics  # noqa: E402
from ..utils.payload import parse_function_payload  # noqa: E402

# 固定画布与坐标范围
PLOT_WIDTH = 500
PLOT_HEIGHT = 300
Y_DOMAIN: tuple[float, float] = (-10.0, 10.0)
CURVE_COLOR = "#2563eb"  # blue-600

DEFAULT_SAMPLES = 500

# ---------------------------------------------------------------------------
# 表达式编译
# ---------------------------------------------------------------------------

X = sp.Symbol("x", real=True)

FUNCTIONS = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "sqrt": sp.sqrt,
    "exp": sp.exp,
    "log": sp.log,
    "ln": sp.log,
    "abs": sp.Abs,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "sign": sp.sign,
}

CONSTANTS = {
    "pi": sp.pi,
    "PI": sp.pi,
    "e": sp.E,
    "E": sp.E,
}

ALLOWED_CHARS = re.compile(r"^[0-9A-Za-z.+\-*/^(),\s]*$")
NUMBER = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

def float_literals(tokens, local_dict, global_dict):
    """整数字面量按浮点数处理，常量运算不再走精确大整数"""
    return [
        (NAME, "Float") if toknum == NAME and tokval == "Integer" else (toknum, tokval)
        for toknum, tokval in tokens
    ]


TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
    float_literals,
)


def compile_expression(text: str) -> Callable[[np.ndarray], np.ndarray]:
    """
    将表达式编译为 numpy 函数

    只接受变量 x 以及白名单中的函数和常量；在交给 sympy 之前先做字符与标识符检查，
    未知名字不会被求值。

    Args:
        text: 表达式，如 x^2、2x + 1、sin(x)

    Returns:
        向量化函数 f(xs) -> ys

    Raises:
        ExternalEngineError: 表达式无法解析
    """
    if not text.strip():
        raise ExternalEngineError("表达式为空")
    if not ALLOWED_CHARS.match(text):
        raise ExternalEngineError(f"表达式包含非法字符: {text!r}")

    names: dict[str, object] = {"x": X, **FUNCTIONS, **CONSTANTS}
    for identifier in IDENTIFIER.findall(NUMBER.sub(" ", text)):
        if identifier not in names:
            raise ExternalEngineError(f"未知标识符: {identifier}")

    try:
        expr = parse_expr(
            text,
            local_dict=names,
            transformations=TRANSFORMATIONS,
            evaluate=False,
        )
    except Exception as e:
        raise ExternalEngineError(f"无法解析表达式 {text!r}: {e}") from e

    if not isinstance(expr, sp.Expr):
        raise ExternalEngineError(f"表达式不是数值函数: {text!r}")
    extra = expr.free_symbols - {X}
    if extra:
        raise ExternalEngineError(f"未知变量: {', '.join(sorted(map(str, extra)))}")

    return sp.lambdify(X, expr, modules="numpy")


def sample(
    fn: Callable[[np.ndarray], np.ndarray],
    domain: tuple[float, float],
    samples: int,
    y_domain: tuple[float, float] = Y_DOMAIN,
) -> tuple[np.ndarray, np.ndarray]:
    """在横轴范围内采样，非实数和远超纵轴范围的点置为 NaN，使折线在间断处断开"""
    xs = np.linspace(domain[0], domain[1], samples)
    with np.errstate(all="ignore"):
        try:
            ys = np.asarray(fn(xs))
        except (OverflowError, ZeroDivisionError):
            # 常量部分溢出或除零，整条曲线没有有限值
            ys = np.full(xs.shape, np.nan)
    if np.iscomplexobj(ys):
        ys = np.where(np.abs(ys.imag) < 1e-12, ys.real, np.nan)
    ys = np.array(np.broadcast_to(ys, xs.shape), dtype=float)

    span = y_domain[1] - y_domain[0]
    with np.errstate(invalid="ignore"):
        far = (ys < y_domain[0] - 10 * span) | (ys > y_domain[1] + 10 * span)
    ys[~np.isfinite(ys) | far] = np.nan
    return xs, ys


def check_domain(domain: tuple[float, ...], axis: str = "横轴") -> tuple[float, float]:
    """校验坐标范围：恰好两个有限且不相等的数"""
    if len(domain) != 2:
        raise ExternalEngineError(f"{axis}范围应为两个数，实际为 {len(domain)} 个")
    lo, hi = float(domain[0]), float(domain[1])
    if not (np.isfinite(lo) and np.isfinite(hi)) or lo == hi:
        raise ExternalEngineError(f"{axis}范围无效: [{lo}, {hi}]")
    return lo, hi


# ---------------------------------------------------------------------------
# 引擎接口
# ---------------------------------------------------------------------------


class PlotSeries(BaseModel):
    """一条数据曲线"""
    fn: str = Field(..., description="表达式")
    color: str = Field(default=CURVE_COLOR, description="曲线颜色")
    graph_type: Literal["polyline"] = Field(default="polyline", description="连线方式")


class PlotOptions(BaseModel):
    """一次绘图调用的完整配置"""
    width: int = Field(default=PLOT_WIDTH, description="画布宽度（像素）")
    height: int = Field(default=PLOT_HEIGHT, description="画布高度（像素）")
    grid: bool = Field(default=True, description="是否绘制网格")
    data: list[PlotSeries] = Field(default_factory=list, description="数据曲线")
    x_domain: tuple[float, ...] = Field(..., description="横轴范围")
    y_domain: tuple[float, float] = Field(default=Y_DOMAIN, description="纵轴范围")


class PlotSurface:
    """
    绘图画布

    每次渲染新建一个，用完即关闭，不跨渲染保留
    """

    def __init__(self, dpi: int = 100):
        self.dpi = dpi
        self.figure = plt.figure(dpi=dpi)

    def to_svg(self) -> str:
        """导出为可内联的 SVG 文本（去掉 XML 声明）"""
        buf = io.BytesIO()
        # 固定 hashsalt 和去掉日期，保证相同输入得到相同输出
        with matplotlib.rc_context({"svg.hashsalt": "mdviz"}):
            self.figure.savefig(buf, format="svg", metadata={"Date": None})
        text = buf.getvalue().decode("utf-8")
        return text[text.find("<svg"):].strip()

    def to_png_base64(self) -> str:
        buf = io.BytesIO()
        self.figure.savefig(buf, format="png", dpi=self.dpi)
        return base64.b64encode(buf.getvalue()).decode("ascii")

    def close(self) -> None:
        plt.close(self.figure)

    def __enter__(self) -> PlotSurface:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class PlotEngine(ABC):
    """绘图引擎抽象基类"""

    @abstractmethod
    def draw_plot(self, surface: PlotSurface, options: PlotOptions) -> None:
        """
        在画布上绘制

        Args:
            surface: 调用方持有的画布
            options: 绘图配置
        """
        pass


class MatplotlibPlotEngine(PlotEngine):
    """基于 matplotlib 的绘图引擎"""

    def __init__(self, samples: int = DEFAULT_SAMPLES):
        self.samples = samples

    def draw_plot(self, surface: PlotSurface, options: PlotOptions) -> None:
        x_domain = check_domain(options.x_domain, "横轴")
        y_domain = check_domain(options.y_domain, "纵轴")
        curves = [(series, compile_expression(series.fn)) for series in options.data]

        fig = surface.figure
        fig.clear()
        fig.set_size_inches(options.width / surface.dpi, options.height / surface.dpi)
        ax = fig.add_subplot(1, 1, 1)
        ax.set_xlim(x_domain)
        ax.set_ylim(y_domain)
        if options.grid:
            ax.grid(True, color="#e5e7eb", linewidth=0.8)
        ax.set_axisbelow(True)
        ax.axhline(0, color="#9ca3af", linewidth=0.8)
        ax.axvline(0, color="#9ca3af", linewidth=0.8)
        ax.tick_params(labelsize=8)

        for series, fn in curves:
            xs, ys = sample(fn, x_domain, self.samples, y_domain)
            ax.plot(xs, ys, color=series.color, linewidth=2)

        fig.tight_layout(pad=0.4)
        # 在引擎内完成一次绘制，渲染阶段的错误也在这里抛出
        fig.canvas.draw()


# ---------------------------------------------------------------------------
# 适配器与组件
# ---------------------------------------------------------------------------


class FunctionPlotAdapter:
    """
    函数图像适配器

    以固定画布尺寸、网格、单条曲线和固定纵轴范围调用绘图引擎。
    引擎抛出的任何异常都在这里截获并写入诊断通道。
    """

    def __init__(
        self,
        engine: PlotEngine | None = None,
        channel: DiagnosticChannel | None = None,
    ):
        self.engine = engine or MatplotlibPlotEngine()
        self.channel = channel or default_diagnostics

    def build_options(self, spec: FunctionPlotSpec) -> PlotOptions:
        return PlotOptions(
            width=PLOT_WIDTH,
            height=PLOT_HEIGHT,
            grid=True,
            data=[PlotSeries(fn=spec.fn, color=CURVE_COLOR, graph_type="polyline")],
            x_domain=spec.x_domain,
            y_domain=Y_DOMAIN,
        )

    def draw(self, surface: PlotSurface, spec: FunctionPlotSpec) -> bool:
        """
        调用一次绘图引擎

        Returns:
            是否绘制成功
        """
        try:
            self.engine.draw_plot(surface, self.build_options(spec))
        except Exception as e:
            error = e if isinstance(e, ExternalEngineError) else ExternalEngineError(str(e))
            self.channel.error("function-plot", f"绘制 {spec.fn!r} 失败", error)
            return False
        return True


class FunctionPlotRenderer:
    """plot-function 代码块组件：解析、取新画布、绘制、导出"""

    def __init__(
        self,
        adapter: FunctionPlotAdapter | None = None,
        channel: DiagnosticChannel | None = None,
        plot_format: Literal["svg", "png"] = "svg",
        dpi: int = 100,
    ):
        self.channel = channel or default_diagnostics
        self.adapter = adapter or FunctionPlotAdapter(channel=self.channel)
        self.plot_format = plot_format
        self.dpi = dpi

    def render(self, content: str) -> str:
        """
        渲染 plot-function 代码块

        载荷无效或引擎失败时返回空容器
        """
        body = ""
        spec = parse_function_payload(content, self.channel)
        if spec is not None:
            with PlotSurface(self.dpi) as surface:
                if self.adapter.draw(surface, spec):
                    body = self._export(surface, spec)
        return f'<div class="mdviz-diagram mdviz-function-plot">{body}</div>\n'

    def _export(self, surface: PlotSurface, spec: FunctionPlotSpec) -> str:
        try:
            if self.plot_format == "png":
                data = surface.to_png_base64()
                return f'<img alt="plot" src="data:image/png;base64,{data}"/>'
            return surface.to_svg()
        except Exception as e:
            self.channel.error("function-plot", f"导出 {spec.fn!r} 失败", ExternalEngineError(str(e)))
            return ""
