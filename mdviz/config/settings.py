"""
配置管理模块
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class RenderConfig(BaseModel):
    """渲染配置"""
    page_title: str = Field(default="mdviz", description="HTML 页面标题")
    plot_format: Literal["svg", "png"] = Field(default="svg", description="函数图像输出格式")
    plot_dpi: int = Field(default=100, gt=0, description="函数图像分辨率")
    plot_samples: int = Field(default=500, ge=2, description="函数曲线采样点数")
    quiet: bool = Field(default=False, description="不在终端输出诊断信息")


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(
    env_file: str | Path | None = None,
    config_file: str | Path | None = None,
) -> RenderConfig:
    """
    加载配置

    优先级：YAML 配置文件 > 环境变量（MDVIZ_*，可来自 .env）> 默认值

    Args:
        env_file: .env 文件路径，默认为当前目录的 .env
        config_file: YAML 配置文件路径（可选）

    Returns:
        RenderConfig 实例
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    data: dict[str, Any] = {}
    env_map = {
        "page_title": "MDVIZ_PAGE_TITLE",
        "plot_format": "MDVIZ_PLOT_FORMAT",
        "plot_dpi": "MDVIZ_PLOT_DPI",
        "plot_samples": "MDVIZ_PLOT_SAMPLES",
        "quiet": "MDVIZ_QUIET",
    }
    for field, name in env_map.items():
        value = os.getenv(name)
        if value is None:
            continue
        if field in ("plot_dpi", "plot_samples"):
            data[field] = int(value)
        elif field == "quiet":
            data[field] = _env_bool(value)
        else:
            data[field] = value

    if config_file:
        with open(config_file, "r", encoding="utf-8") as f:
            file_data = yaml.safe_load(f) or {}
        if not isinstance(file_data, dict):
            raise ValueError(f"配置文件格式错误，应为键值对: {config_file}")
        data.update(file_data)

    return RenderConfig(**data)
