"""
诊断通道

图表渲染中被吞下的错误不会打断文档渲染，但都会在这里留下记录并输出到 stderr
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape

# 每个通道保留的诊断记录上限
MAX_RECORDS = 200


class Diagnostic(BaseModel):
    """一条诊断记录"""
    level: Literal["error", "warning"] = Field(..., description="级别")
    source: str = Field(..., description="产生记录的组件")
    message: str = Field(..., description="描述")
    error_type: str | None = Field(default=None, description="异常类名")


class DiagnosticChannel:
    """
    诊断通道

    记录诊断并用 rich 在 stderr 上打印。只保留最近 max_records 条记录，
    长时间运行（如 watch）时不会无限增长。
    """

    def __init__(
        self,
        console: Console | None = None,
        quiet: bool = False,
        max_records: int = MAX_RECORDS,
    ):
        self.console = console or Console(stderr=True)
        self.quiet = quiet
        self.max_records = max_records
        self.records: list[Diagnostic] = []

    def report(
        self,
        level: Literal["error", "warning"],
        source: str,
        message: str,
        exc: BaseException | None = None,
    ) -> Diagnostic:
        """
        记录一条诊断

        Args:
            level: error 或 warning
            source: 组件名，如 function-plot
            message: 描述
            exc: 关联的异常（可选）

        Returns:
            生成的 Diagnostic
        """
        record = Diagnostic(
            level=level,
            source=source,
            message=message,
            error_type=type(exc).__name__ if exc is not None else None,
        )
        self.records.append(record)
        if len(self.records) > self.max_records:
            del self.records[:-self.max_records]

        if not self.quiet:
            color = "red" if level == "error" else "yellow"
            detail = f": {exc}" if exc is not None else ""
            self.console.print(
                f"[{color}]{source}: {escape(message)}{escape(detail)}[/{color}]"
            )
        return record

    def error(self, source: str, message: str, exc: BaseException | None = None) -> Diagnostic:
        return self.report("error", source, message, exc)

    def warning(self, source: str, message: str, exc: BaseException | None = None) -> Diagnostic:
        return self.report("warning", source, message, exc)

    def clear(self) -> None:
        self.records.clear()


# 默认共享通道
diagnostics = DiagnosticChannel()
