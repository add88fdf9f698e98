"""
异常定义

载荷解析与绘图引擎的错误分类，均在图表组件边界内被捕获
"""

from __future__ import annotations


class MdvizError(Exception):
    """mdviz 异常基类"""


class PayloadError(MdvizError):
    """代码块载荷错误"""


class PayloadDecodeError(PayloadError):
    """载荷不是合法的 JSON"""


class PayloadShapeError(PayloadError):
    """载荷可解码，但结构与预期不符"""


class ExternalEngineError(MdvizError):
    """绘图引擎拒绝表达式或配置"""
