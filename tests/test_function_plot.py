"""
测试函数图像适配器
"""

import time

import numpy as np
import pytest

from mdviz.diagram import (
    FunctionPlotAdapter,
    FunctionPlotRenderer,
    MatplotlibPlotEngine,
    PlotSurface,
    check_domain,
    compile_expression,
)
from mdviz.diagram.function_plot import sample
from mdviz.errors import ExternalEngineError
from mdviz.models import FunctionPlotSpec

from conftest import FakePlotEngine


def test_adapter_invokes_engine_once_with_fixed_options(fake_engine, channel):
    adapter = FunctionPlotAdapter(engine=fake_engine, channel=channel)
    with PlotSurface() as surface:
        assert adapter.draw(surface, FunctionPlotSpec(fn="x^2")) is True

    (options,) = fake_engine.calls
    assert (options.width, options.height) == (500, 300)
    assert options.grid is True
    assert options.x_domain == (-10, 10)
    assert options.y_domain == (-10, 10)
    assert len(options.data) == 1
    assert options.data[0].fn == "x^2"
    assert options.data[0].graph_type == "polyline"
    assert options.data[0].color == "#2563eb"


def test_adapter_uses_payload_domain_for_x_only(fake_engine, channel):
    adapter = FunctionPlotAdapter(engine=fake_engine, channel=channel)
    with PlotSurface() as surface:
        adapter.draw(surface, FunctionPlotSpec(fn="x", domain=[0, 5]))
    (options,) = fake_engine.calls
    assert options.x_domain == (0, 5)
    assert options.y_domain == (-10, 10)


@pytest.mark.parametrize("error", [ExternalEngineError("bad"), RuntimeError("boom")])
def test_adapter_swallows_engine_errors(error, channel):
    adapter = FunctionPlotAdapter(engine=FakePlotEngine(error=error), channel=channel)
    with PlotSurface() as surface:
        assert adapter.draw(surface, FunctionPlotSpec(fn="x")) is False
    (record,) = channel.records
    assert record.error_type == "ExternalEngineError"
    assert record.source == "function-plot"


def test_renderer_skips_engine_for_malformed_payload(fake_plot_renderer, fake_engine, channel):
    html = fake_plot_renderer.render("not json")
    assert fake_engine.calls == []
    assert html == '<div class="mdviz-diagram mdviz-function-plot"></div>\n'
    assert channel.records[0].error_type == "PayloadDecodeError"


def test_renderer_skips_engine_for_wrong_shape(fake_plot_renderer, fake_engine, channel):
    fake_plot_renderer.render('[{"fn": "x"}]')
    assert fake_engine.calls == []
    assert channel.records[0].error_type == "PayloadShapeError"


def test_renderer_with_failing_engine_outputs_empty_container(channel):
    adapter = FunctionPlotAdapter(engine=FakePlotEngine(error=ValueError("nope")), channel=channel)
    html = FunctionPlotRenderer(adapter=adapter, channel=channel).render('{"fn": "x"}')
    assert html == '<div class="mdviz-diagram mdviz-function-plot"></div>\n'


def test_compile_expression_basic():
    xs = np.array([-2.0, 0.0, 3.0])
    assert np.allclose(compile_expression("x^2")(xs), [4, 0, 9])
    assert np.allclose(compile_expression("2x + 1")(xs), [-3, 1, 7])
    assert np.allclose(compile_expression("sin(x)")(xs), np.sin(xs))
    assert np.allclose(compile_expression("1e3*x")(xs), xs * 1000)
    assert np.allclose(compile_expression("abs(x) + pi")(xs), np.abs(xs) + np.pi)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "__import__('os').system('echo hi')",
        "y + 1",
        "foo(x)",
        "x +* ",
        "x; 1",
    ],
)
def test_compile_expression_rejects(text):
    with pytest.raises(ExternalEngineError):
        compile_expression(text)


def test_sample_constant_and_invalid_points():
    xs, ys = sample(compile_expression("3"), (-1, 1), 5)
    assert ys.shape == xs.shape
    assert np.allclose(ys, 3)

    xs, ys = sample(compile_expression("sqrt(x)"), (-4, 4), 9)
    assert np.isnan(ys[xs < 0]).all()
    assert np.allclose(ys[xs >= 0], np.sqrt(xs[xs >= 0]))


@pytest.mark.parametrize("domain", [(1, 2, 3), (), (5, 5), (0, float("inf"))])
def test_check_domain_rejects(domain):
    with pytest.raises(ExternalEngineError):
        check_domain(domain)


def test_matplotlib_renderer_outputs_svg(channel):
    renderer = FunctionPlotRenderer(channel=channel)
    html = renderer.render('{"fn": "x^2"}')
    assert html.startswith('<div class="mdviz-diagram mdviz-function-plot"><svg')
    assert "</svg></div>" in html
    assert channel.records == []


def test_matplotlib_renderer_is_deterministic(channel):
    renderer = FunctionPlotRenderer(channel=channel)
    payload = '{"fn": "sin(x)", "domain": [0, 6]}'
    assert renderer.render(payload) == renderer.render(payload)


def test_matplotlib_renderer_png(channel):
    renderer = FunctionPlotRenderer(channel=channel, plot_format="png")
    html = renderer.render('{"fn": "x"}')
    assert '<img alt="plot" src="data:image/png;base64,' in html


@pytest.mark.parametrize(
    "payload",
    ['{"fn": "x +"}', '{"fn": "y"}', '{"fn": ""}', '{"fn": "x", "domain": [1]}'],
)
def test_matplotlib_renderer_bad_expression_is_caught(payload, channel):
    html = FunctionPlotRenderer(channel=channel).render(payload)
    assert html == '<div class="mdviz-diagram mdviz-function-plot"></div>\n'
    assert channel.records[0].error_type == "ExternalEngineError"


def test_matplotlib_engine_sizes_surface():
    engine = MatplotlibPlotEngine(samples=50)
    adapter = FunctionPlotAdapter(engine=engine)
    with PlotSurface(dpi=100) as surface:
        assert adapter.draw(surface, FunctionPlotSpec(fn="x"))
        width, height = surface.figure.get_size_inches() * surface.dpi
    assert (round(width), round(height)) == (500, 300)


def test_constant_power_tower_compiles_without_exact_arithmetic():
    start = time.monotonic()
    fn = compile_expression("9^9^9^9")
    xs, ys = sample(fn, (-1, 1), 5)
    assert time.monotonic() - start < 5
    assert np.isnan(ys).all()


def test_division_by_zero_constant_samples_to_nan():
    xs, ys = sample(compile_expression("1/0"), (-1, 1), 5)
    assert np.isnan(ys).all()


def test_renderer_handles_power_tower_quickly(channel):
    start = time.monotonic()
    html = FunctionPlotRenderer(channel=channel).render('{"fn": "9^9^9^9"}')
    assert time.monotonic() - start < 10
    assert html.startswith('<div class="mdviz-diagram mdviz-function-plot">')
    assert html.endswith("</div>\n")
