"""Tests for the point, line and polygon generators."""
import pytest
from shapely.errors import GEOSException
from shapely.geometry import LineString, Point, Polygon, box, shape

from geomockery.core.constraint import resolve_constraint
from geomockery.core.generators import (
    generate_line,
    generate_point,
    generate_polygon,
    sample_point,
    within_range,
)
from geomockery.core.geometry import line_length_m, polygon_area_m2
from geomockery.core.models import ResolvedConstraint
from geomockery.core.randomness import RandomValueProvider
from geomockery.models import BoundingBox, parse_attribute_schema


def _open(bbox=(-1, -1, 1, 1)):
    return ResolvedConstraint(bbox=BoundingBox.from_list(bbox))


def _triangle_constraint():
    # Triangle filling half of its bounding box
    triangle = {"type": "Polygon", "coordinates": [[[0, 0], [0.05, 0], [0, 0.05], [0, 0]]]}
    return resolve_constraint(triangle, source="drawn")


def _needle_constraint():
    # Near-zero-area polygon inside a huge bounding box
    return ResolvedConstraint(
        bbox=BoundingBox.from_list([-170, -80, 170, 80]),
        polygon=box(10.0, 10.0, 10.0000001, 10.0000001),
        source="drawn",
    )


class TestWithinRange:
    def test_inclusive(self):
        assert within_range(100.0, 100.0, 1000.0)
        assert within_range(1000.0, 100.0, 1000.0)

    def test_tolerance(self):
        assert within_range(999.99999999, 1000.0, 1000.0)
        assert not within_range(990.0, 1000.0, 1000.0)

    def test_inverted_range_never_matches(self):
        assert not within_range(5000.0, 10000.0, 1000.0)


class TestPointGenerator:
    def test_single_point_in_bbox(self):
        feature = generate_point(_open(), [], RandomValueProvider(seed=1))
        assert feature is not None
        lon, lat = feature.geometry["coordinates"]
        assert -1 <= lon <= 1 and -1 <= lat <= 1
        assert feature.geometry["type"] == "Point"
        assert feature.geometry_type == "point"

    def test_points_inside_constraining_polygon(self):
        constraint = _triangle_constraint()
        rng = RandomValueProvider(seed=2)
        for _ in range(200):
            feature = generate_point(constraint, [], rng)
            assert feature is not None
            assert constraint.polygon.covers(shape(feature.geometry))

    def test_infeasible_returns_none(self):
        rng = RandomValueProvider(seed=3)
        assert generate_point(_needle_constraint(), [], rng, max_attempts=50) is None

    def test_attributes_attached(self):
        schema = parse_attribute_schema([{"name": "kind", "type": "nominal", "values": ["a"]}])
        feature = generate_point(_open(), schema, RandomValueProvider(seed=4))
        assert feature.properties == {"kind": "a"}

    def test_predicate_error_accepts_candidate(self, monkeypatch):
        from geomockery.core import generators

        def point_in_polygon(polygon, point):
            raise GEOSException("broken polygon")

        monkeypatch.setattr(generators, "point_in_polygon", point_in_polygon)
        point = sample_point(_needle_constraint(), RandomValueProvider(seed=5), max_attempts=1)
        assert isinstance(point, Point)


class TestLineGenerator:
    def test_length_within_range(self):
        rng = RandomValueProvider(seed=6)
        for _ in range(50):
            feature = generate_line(_open((0, 0, 0.1, 0.1)), [], rng, min_length=100, max_length=1000)
            assert feature is not None
            line = LineString(feature.geometry["coordinates"])
            measured = line_length_m(line)
            assert 100 - 1e-3 <= measured <= 1000 + 1e-3
            assert feature.properties["length"] == pytest.approx(measured)
            assert len(feature.geometry["coordinates"]) == 2

    def test_lines_touch_constraining_polygon(self):
        constraint = _triangle_constraint()
        rng = RandomValueProvider(seed=7)
        for _ in range(50):
            feature = generate_line(constraint, [], rng, min_length=100, max_length=2000)
            assert feature is not None
            assert constraint.polygon.intersects(shape(feature.geometry))

    def test_exact_length(self):
        feature = generate_line(_open((0, 0, 0.1, 0.1)), [], RandomValueProvider(seed=8),
                                min_length=500, max_length=500)
        assert feature is not None
        assert feature.properties["length"] == pytest.approx(500, abs=1e-3)

    def test_infeasible_returns_none(self):
        feature = generate_line(_needle_constraint(), [], RandomValueProvider(seed=9), max_attempts=5)
        assert feature is None

    def test_inverted_range_returns_none(self):
        feature = generate_line(_open(), [], RandomValueProvider(seed=10),
                                min_length=1000, max_length=100, max_attempts=10)
        assert feature is None

    def test_length_property_not_overridden_by_schema_order(self):
        schema = parse_attribute_schema([{"name": "road", "type": "nominal", "values": ["A1"]}])
        feature = generate_line(_open((0, 0, 0.1, 0.1)), schema, RandomValueProvider(seed=11))
        assert set(feature.properties) == {"road", "length"}


class TestPolygonGenerator:
    def test_area_within_range_and_closed(self):
        rng = RandomValueProvider(seed=12)
        produced = 0
        for _ in range(30):
            feature = generate_polygon(_open((0, 0, 0.1, 0.1)), [], rng, min_area=1000, max_area=10_000)
            if feature is None:
                continue
            produced += 1
            ring = feature.geometry["coordinates"][0]
            assert ring[0] == ring[-1]
            assert 7 <= len(ring) <= 13
            polygon = Polygon(ring)
            assert polygon.is_valid
            assert polygon.exterior.is_ccw
            area = polygon_area_m2(polygon)
            assert 1000 - 1e-2 <= area <= 10_000 + 1e-2
            assert feature.properties["area"] == pytest.approx(area)
        assert produced == 30

    def test_polygons_touch_constraining_polygon(self):
        constraint = _triangle_constraint()
        rng = RandomValueProvider(seed=13)
        for _ in range(20):
            feature = generate_polygon(constraint, [], rng)
            assert feature is not None
            assert constraint.polygon.intersects(shape(feature.geometry))

    def test_exact_area_is_near_infeasible(self):
        feature = generate_polygon(_open(), [], RandomValueProvider(seed=14),
                                   min_area=1000, max_area=1000)
        if feature is not None:
            assert feature.properties["area"] == pytest.approx(1000, abs=1e-2)

    def test_inverted_range_returns_none(self):
        feature = generate_polygon(_open(), [], RandomValueProvider(seed=15),
                                   min_area=10_000, max_area=1000, max_attempts=10)
        assert feature is None

    def test_infeasible_constraint_returns_none(self):
        feature = generate_polygon(_needle_constraint(), [], RandomValueProvider(seed=16), max_attempts=5)
        assert feature is None

    def test_same_seed_same_polygon(self):
        a = generate_polygon(_open(), [], RandomValueProvider(seed=17))
        b = generate_polygon(_open(), [], RandomValueProvider(seed=17))
        assert a == b


class TestAntimeridian:
    """Shapes started next to 180 degrees must not span the whole map."""

    def _widths(self, features):
        widths = []
        for f in features:
            coords = f.geometry["coordinates"]
            if f.geometry["type"] == "Polygon":
                coords = coords[0]
            lons = [c[0] for c in coords]
            widths.append(max(lons) - min(lons))
        return widths

    def test_lines_stay_compact(self):
        rng = RandomValueProvider(3)
        constraint = _open((179.9999, 0, 180, 0.001))
        features = [generate_line(constraint, [], rng) for _ in range(50)]
        features = [f for f in features if f is not None]
        assert features
        assert max(self._widths(features)) < 1

    def test_polygons_stay_compact(self):
        rng = RandomValueProvider(3)
        constraint = _open((179.9999, 0, 180, 0.001))
        features = [generate_polygon(constraint, [], rng) for _ in range(20)]
        features = [f for f in features if f is not None]
        assert features
        assert max(self._widths(features)) < 1
        for f in features:
            assert 1000 - 1e-2 <= f.properties["area"] <= 10_000 + 1e-2
