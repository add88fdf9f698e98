"""
工具函数模块
"""

from .diagnostics import Diagnostic, DiagnosticChannel, diagnostics
from .payload import (
    decode_force_payload,
    decode_function_payload,
    decode_payload,
    parse_force_payload,
    parse_function_payload,
)

__all__ = [
    "Diagnostic",
    "DiagnosticChannel",
    "diagnostics",
    "decode_payload",
    "decode_force_payload",
    "decode_function_payload",
    "parse_force_payload",
    "parse_function_payload",
]
