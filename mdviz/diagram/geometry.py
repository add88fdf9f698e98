"""
力向量几何计算

模型坐标（y 向上）到画布像素坐标（y 向下）的变换与标签定位
"""

from __future__ import annotations

from typing import Iterable

from ..models import ForceVector, VectorProjection

# 1 个模型单位 = 20 像素
SCALE = 20.0

# 标签相对箭头终点的偏移，按分量符号选择，避免压住箭头
LABEL_OFFSET_RIGHT = 10.0
LABEL_OFFSET_LEFT = -20.0
LABEL_OFFSET_UP = -10.0
LABEL_OFFSET_DOWN = 20.0


def project(vector: ForceVector, center: float, scale: float = SCALE) -> VectorProjection:
    """
    计算单个力在画布上的终点与标签位置

    所有力都从同一个原点 (center, center) 出发。零向量合法，终点即原点。

    Args:
        vector: 力
        center: 原点在画布上的坐标（横纵相同）
        scale: 每个模型单位对应的像素数

    Returns:
        VectorProjection
    """
    end_x = center + vector.x * scale
    end_y = center - vector.y * scale
    dx = LABEL_OFFSET_RIGHT if vector.x >= 0 else LABEL_OFFSET_LEFT
    dy = LABEL_OFFSET_UP if vector.y >= 0 else LABEL_OFFSET_DOWN
    return VectorProjection(
        end_x=end_x,
        end_y=end_y,
        label_x=end_x + dx,
        label_y=end_y + dy,
    )


def project_all(
    vectors: Iterable[ForceVector],
    center: float,
    scale: float = SCALE,
) -> list[VectorProjection]:
    """按输入顺序投影一组力"""
    return [project(v, center, scale) for v in vectors]
