"""
图表载荷数据模型：FunctionPlotSpec, ForceVector, VectorProjection
"""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictFloat

# 函数图像默认横轴范围
DEFAULT_DOMAIN: tuple[float, float] = (-10.0, 10.0)

# 力的默认颜色（red-500）
FORCE_RED = "#ef4444"


class FunctionPlotSpec(BaseModel):
    """plot-function 代码块的载荷"""
    fn: str = Field(..., strict=True, description="函数表达式，如 x^2")
    domain: list[StrictFloat] | None = Field(default=None, strict=True, description="横轴范围 [min, max]")

    model_config = {"frozen": True}

    @property
    def x_domain(self) -> tuple[float, ...]:
        """实际使用的横轴范围（不校验，畸形范围交给绘图引擎处理）"""
        if self.domain is None:
            return DEFAULT_DOMAIN
        return tuple(self.domain)


class ForceVector(BaseModel):
    """plot-force 代码块中的单个力"""
    name: str = Field(..., strict=True, description="标签文本")
    x: float = Field(..., strict=True, allow_inf_nan=False, description="水平分量（模型单位）")
    y: float = Field(..., strict=True, allow_inf_nan=False, description="竖直分量（模型单位，向上为正）")
    color: str | None = Field(default=None, strict=True, description="颜色")

    model_config = {"frozen": True}

    @property
    def stroke(self) -> str:
        return self.color or FORCE_RED


class VectorProjection(BaseModel):
    """力在画布像素空间中的投影"""
    end_x: float
    end_y: float
    label_x: float
    label_y: float
