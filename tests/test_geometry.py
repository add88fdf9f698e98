"""
测试力向量几何计算
"""

import pytest

from mdviz.diagram import SCALE, project, project_all
from mdviz.models import ForceVector

CENTER = 150


@pytest.mark.parametrize(
    "x, y",
    [(0, -10), (3, 4), (-2.5, 7), (-6, -1.5), (0.25, 0), (100, -100)],
)
def test_projection_matches_scaled_components(x, y):
    p = project(ForceVector(name="F", x=x, y=y), CENTER, SCALE)
    assert p.end_x - CENTER == x * SCALE
    assert CENTER - p.end_y == y * SCALE


def test_gravity_scenario():
    p = project(ForceVector(name="Gravity", x=0, y=-10), CENTER, 20)
    assert (p.end_x, p.end_y) == (150, 350)
    # x >= 0 向右偏 10，y < 0 向下偏 20
    assert (p.label_x - p.end_x, p.label_y - p.end_y) == (10, 20)


@pytest.mark.parametrize(
    "x, y, offset",
    [
        (1, 1, (10, -10)),
        (-1, 1, (-20, -10)),
        (-1, -1, (-20, 20)),
        (1, -1, (10, 20)),
        (0, 0, (10, -10)),
    ],
)
def test_label_offset_by_quadrant(x, y, offset):
    p = project(ForceVector(name="F", x=x, y=y), CENTER)
    assert (p.label_x - p.end_x, p.label_y - p.end_y) == offset


def test_zero_vector_ends_at_center():
    p = project(ForceVector(name="Zero", x=0, y=0), CENTER)
    assert (p.end_x, p.end_y) == (CENTER, CENTER)


def test_project_all_keeps_order():
    forces = [
        ForceVector(name="A", x=1, y=0),
        ForceVector(name="B", x=0, y=1),
        ForceVector(name="C", x=-1, y=0),
    ]
    points = project_all(forces, CENTER)
    assert [(p.end_x, p.end_y) for p in points] == [(170, 150), (150, 130), (130, 150)]
