"""
载荷解析

将代码块中的 JSON 文本解码为 FunctionPlotSpec 或 ForceVector 列表
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from ..errors import PayloadDecodeError, PayloadError, PayloadShapeError
from ..models import ForceVector, FunctionPlotSpec
from .diagnostics import DiagnosticChannel, diagnostics as default_diagnostics


def _reject_constant(name: str) -> Any:
    # JSON 语法中没有 NaN / Infinity
    raise ValueError(f"非法的 JSON 常量: {name}")


def decode_payload(text: str) -> Any:
    """
    解码 JSON 载荷

    Raises:
        PayloadDecodeError: 文本不是合法的 JSON
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise PayloadDecodeError(f"载荷不是合法的 JSON: {e}") from e


def decode_force_payload(text: str) -> list[ForceVector]:
    """
    严格解析受力载荷

    Raises:
        PayloadDecodeError: JSON 语法错误
        PayloadShapeError: 不是力对象数组
    """
    data = decode_payload(text)
    if not isinstance(data, list):
        raise PayloadShapeError(f"受力载荷应为数组，实际为 {type(data).__name__}")
    forces = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise PayloadShapeError(f"第 {index} 个力应为对象，实际为 {type(item).__name__}")
        try:
            forces.append(ForceVector.model_validate(item))
        except ValidationError as e:
            raise PayloadShapeError(f"第 {index} 个力结构错误: {e.error_count()} 处不符") from e
    return forces


def decode_function_payload(text: str) -> FunctionPlotSpec:
    """
    严格解析函数图像载荷

    Raises:
        PayloadDecodeError: JSON 语法错误
        PayloadShapeError: 不是 {"fn": ..., "domain"?: ...} 对象
    """
    data = decode_payload(text)
    if not isinstance(data, dict):
        raise PayloadShapeError(f"函数载荷应为对象，实际为 {type(data).__name__}")
    try:
        return FunctionPlotSpec.model_validate(data)
    except ValidationError as e:
        raise PayloadShapeError(f"函数载荷结构错误: {e.error_count()} 处不符") from e


def parse_force_payload(
    text: str,
    channel: DiagnosticChannel | None = None,
) -> list[ForceVector]:
    """解析受力载荷，任何错误都退化为空列表"""
    try:
        return decode_force_payload(text)
    except PayloadError as e:
        (channel or default_diagnostics).warning("plot-force", "载荷无效，按无力绘制", e)
        return []


def parse_function_payload(
    text: str,
    channel: DiagnosticChannel | None = None,
) -> FunctionPlotSpec | None:
    """解析函数图像载荷，失败时记录诊断并返回 None"""
    try:
        return decode_function_payload(text)
    except PayloadError as e:
        (channel or default_diagnostics).error("plot-function", "载荷无效，跳过绘图", e)
        return None
