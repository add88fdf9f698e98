"""
测试公共夹具
"""

from __future__ import annotations

import pytest

from mdviz.diagram import FunctionPlotAdapter, FunctionPlotRenderer, PlotEngine, PlotOptions, PlotSurface
from mdviz.utils import DiagnosticChannel


class FakePlotEngine(PlotEngine):
    """记录调用、不实际绘图的引擎"""

    def __init__(self, error: Exception | None = None):
        self.calls: list[PlotOptions] = []
        self.error = error

    def draw_plot(self, surface: PlotSurface, options: PlotOptions) -> None:
        self.calls.append(options)
        if self.error is not None:
            raise self.error


@pytest.fixture
def channel() -> DiagnosticChannel:
    return DiagnosticChannel(quiet=True)


@pytest.fixture
def fake_engine() -> FakePlotEngine:
    return FakePlotEngine()


@pytest.fixture
def fake_plot_renderer(fake_engine, channel) -> FunctionPlotRenderer:
    adapter = FunctionPlotAdapter(engine=fake_engine, channel=channel)
    return FunctionPlotRenderer(adapter=adapter, channel=channel)
