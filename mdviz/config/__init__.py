"""
配置模块
"""

from .settings import RenderConfig, load_config

__all__ = [
    "RenderConfig",
    "load_config",
]
