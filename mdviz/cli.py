"""
mdviz CLI 命令行入口

提供三个命令：
- render: 渲染 Markdown 为 HTML 页面
- check: 检查文档中的图表代码块
- watch: 监视文件变化并重新渲染
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import load_config
from .render import BlockReport, DocumentRenderer, inspect_blocks
from .utils import DiagnosticChannel


app = typer.Typer(
    name="mdviz",
    help="mdviz - 带函数图像与受力图的 Markdown 渲染器",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


@app.command("render")
def render(
    input_file: Path = typer.Argument(
        ...,
        help="Markdown 文件路径",
        exists=True,
        dir_okay=False,
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="输出的 HTML 文件路径（默认与输入同名）",
    ),
    title: Optional[str] = typer.Option(
        None,
        "--title", "-t",
        help="页面标题",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="YAML 配置文件路径",
        exists=True,
    ),
) -> None:
    """
    渲染 Markdown 文档为 HTML 页面

    plot-function 代码块渲染为函数图像，plot-force 代码块渲染为受力图，
    其余代码块原样输出。

    示例:
        mdviz render notes.md -o build/notes.html
    """
    config = load_config(env_file, config_file)
    channel = DiagnosticChannel(quiet=config.quiet)
    renderer = DocumentRenderer(config, channel=channel)

    output_path = output_file or input_file.with_suffix(".html")
    renderer.render_to_file(input_file, output_path, title=title)

    console.print(f"[green]✓ 已生成: {output_path}[/green]")
    failures = len(channel.records)
    if failures:
        console.print(f"[yellow]{failures} 个图表未能正常绘制，运行 mdviz check 查看详情[/yellow]")


@app.command("check")
def check(
    input_file: Path = typer.Argument(
        ...,
        help="Markdown 文件路径",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """
    检查文档中的图表代码块

    逐个校验 plot-function / plot-force 代码块的载荷和表达式，存在错误时退出码为 1。
    """
    text = input_file.read_text(encoding="utf-8")
    reports = inspect_blocks(text)

    if not reports:
        console.print("[dim]未发现图表代码块[/dim]")
        return

    display_reports(reports)

    failed = [r for r in reports if not r.ok]
    if failed:
        console.print(f"[red]✗ {len(failed)}/{len(reports)} 个图表代码块有错误[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ {len(reports)} 个图表代码块全部通过[/green]")


@app.command("watch")
def watch(
    input_file: Path = typer.Argument(
        ...,
        help="Markdown 文件路径",
        exists=True,
        dir_okay=False,
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="输出的 HTML 文件路径（默认与输入同名）",
    ),
    interval: float = typer.Option(
        1.0,
        "--interval", "-n",
        help="轮询间隔（秒）",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="YAML 配置文件路径",
        exists=True,
    ),
) -> None:
    """
    监视 Markdown 文件，内容变化时重新渲染

    只有文本发生变化的图表代码块会被重新绘制。按 Ctrl-C 退出。
    """
    config = load_config(env_file, config_file)
    renderer = DocumentRenderer(config, channel=DiagnosticChannel(quiet=config.quiet))
    output_path = output_file or input_file.with_suffix(".html")

    console.print(Panel(
        "[bold]mdviz 监视模式[/bold]\n"
        f"输入文件: {input_file}\n"
        f"输出文件: {output_path}",
        border_style="blue",
    ))

    last_text: str | None = None
    try:
        while True:
            text = input_file.read_text(encoding="utf-8")
            if text != last_text:
                page = renderer.render_page(text)
                output_path.parent.mkdir(parents=True, exist_ok=True)
                output_path.write_text(page, encoding="utf-8")
                last_text = text
                console.print(
                    f"[green]✓ 第 {renderer.passes} 次渲染[/green] "
                    f"[dim](复用 {renderer.memo.hits} 个代码块，重新绘制 {renderer.memo.misses} 个)[/dim]"
                )
            time.sleep(interval)
    except KeyboardInterrupt:
        console.print("\n[yellow]已停止[/yellow]")


def display_reports(reports: list[BlockReport]) -> None:
    """显示代码块检查结果"""
    table = Table(title="图表代码块", show_header=True)
    table.add_column("行", justify="right")
    table.add_column("类型", style="cyan")
    table.add_column("状态", justify="center")
    table.add_column("说明")

    for report in reports:
        status = "[green]✓[/green]" if report.ok else f"[red]{report.status}[/red]"
        table.add_row(
            str(report.line or "-"),
            report.kind.value,
            status,
            escape(report.message),
        )

    console.print(table)


if __name__ == "__main__":
    app()
