"""Tests de tipos valor de geometría."""

import math

import pytest

from sgis.geom.primitives import BoundingBox, Feature, GeometryType, PointD, as_point, distance
from sgis.utils.errors import SgisValidationError


def test_point_is_immutable():
    p = PointD(1.0, 2.0)
    with pytest.raises(Exception):
        p.x = 3.0  # type: ignore[misc]


def test_distance():
    assert distance(PointD(0, 0), PointD(3, 4)) == 5.0


def test_as_point_accepts_tuples():
    assert as_point((1, 2)) == PointD(1.0, 2.0)
    with pytest.raises(SgisValidationError):
        as_point((1, 2, 3))


def test_bbox_rejects_inverted_bounds():
    with pytest.raises(SgisValidationError):
        BoundingBox(1.0, 0.0, 0.0, 1.0)


def test_bbox_from_points_and_union():
    box = BoundingBox.from_points([PointD(1, 5), PointD(-2, 3), PointD(4, -1)])
    assert box == BoundingBox(-2, -1, 4, 5)
    assert box.width == 6 and box.height == 6
    assert box.center == PointD(1.0, 2.0)
    assert BoundingBox.from_points([]) is None
    assert BoundingBox.union_all([None, box, BoundingBox(10, 10, 11, 11)]) == BoundingBox(-2, -1, 11, 11)
    assert BoundingBox.union_all([]) is None


def test_feature_constructors_and_drawable():
    assert Feature.point(1, 2).points == (PointD(1.0, 2.0),)
    line = Feature.line([(0, 0)])
    assert line.geometry_type == GeometryType.LINE
    assert not line.is_drawable()
    poly = Feature.polygon([(0, 0), (1, 0), (1, 1)])
    assert poly.is_drawable()


def test_feature_extent_ignores_non_finite_points():
    f = Feature.line([(0, 0), (math.nan, 1), (2, 3)])
    assert f.extent() == BoundingBox(0, 0, 2, 3)
