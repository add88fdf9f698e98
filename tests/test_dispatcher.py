"""
测试代码块分发
"""

import html

import pytest

from mdviz.models import Block, BlockKind, extract_language_tag
from mdviz.render import BlockDispatcher


class StubRenderer:
    def __init__(self, name: str):
        self.name = name
        self.calls: list[str] = []

    def render(self, content: str) -> str:
        self.calls.append(content)
        return f"<{self.name}>"


@pytest.fixture
def stubs():
    return StubRenderer("function"), StubRenderer("force")


@pytest.fixture
def dispatcher(stubs):
    function_plot, force_diagram = stubs
    return BlockDispatcher(function_plot=function_plot, force_diagram=force_diagram)


@pytest.mark.parametrize(
    "class_name, tag",
    [
        ("language-python", "python"),
        ("language-plot-force", "plot-force"),
        ("hljs language-plot-function", "plot-function"),
        ("python", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_extract_language_tag(class_name, tag):
    assert extract_language_tag(class_name) == tag


def test_block_kind_from_tag():
    assert BlockKind.from_tag("plot-function") is BlockKind.FUNCTION_PLOT
    assert BlockKind.from_tag("plot-force") is BlockKind.FORCE_DIAGRAM
    assert BlockKind.from_tag("python") is BlockKind.PLAIN
    assert BlockKind.from_tag("") is BlockKind.PLAIN
    assert BlockKind.from_tag("plain") is BlockKind.PLAIN


def test_block_strips_one_trailing_newline():
    block = Block.from_code_element("language-plot-force", "[]\n\n")
    assert block.content == "[]\n"
    assert block.raw == "[]\n\n"
    assert block.language_tag == "plot-force"
    assert block.kind is BlockKind.FORCE_DIAGRAM


def test_function_block_routed_to_function_plot(dispatcher, stubs):
    function_plot, force_diagram = stubs
    out = dispatcher("language-plot-function", '{"fn": "x^2"}\n')
    assert out == "<function>"
    assert function_plot.calls == ['{"fn": "x^2"}']
    assert force_diagram.calls == []


def test_force_block_routed_to_force_diagram(dispatcher, stubs):
    function_plot, force_diagram = stubs
    assert dispatcher("language-plot-force", "[]\n") == "<force>"
    assert force_diagram.calls == ["[]"]
    assert function_plot.calls == []


def test_unrecognized_block_passes_through(dispatcher, stubs):
    source = 'def f(x):\n    return x < 1 and "a" & b\n'
    out = dispatcher("language-python", source)

    assert out.startswith('<pre><code class="language-python">')
    assert out.endswith("</code></pre>\n")
    inner = out[len('<pre><code class="language-python">'):-len("</code></pre>\n")]
    assert html.unescape(inner) == source
    assert all(not stub.calls for stub in stubs)


def test_untagged_block_has_no_class(dispatcher):
    out = dispatcher(None, "plain text\n")
    assert out == "<pre><code>plain text\n</code></pre>\n"


def test_similar_tags_are_plain(dispatcher, stubs):
    dispatcher("language-plot-forces", "[]")
    dispatcher("language-plot", "{}")
    assert all(not stub.calls for stub in stubs)
