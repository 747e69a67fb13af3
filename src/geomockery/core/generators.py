"""Random point, line and polygon generation inside a constraining area.

Every generator runs a bounded rejection-sampling loop: build a candidate,
test it, and give up after ``max_attempts`` tries by returning None.

Any error raised while testing a candidate against the constraining polygon
counts as "no constraint" for that check. Length and area checks are always
applied.
"""

import logging
import math
from typing import Callable, Optional, Sequence

from shapely.errors import GEOSException
from shapely.geometry import LineString, Point
from shapely.geometry.base import BaseGeometry

from ..config import (
    DEFAULT_MAX_AREA_M2,
    DEFAULT_MAX_LENGTH_M,
    DEFAULT_MIN_AREA_M2,
    DEFAULT_MIN_LENGTH_M,
    MAX_ATTEMPTS,
    POLYGON_ANGLE_JITTER_DEG,
    POLYGON_MAX_VERTICES,
    POLYGON_MIN_VERTICES,
    POLYGON_RADIUS_JITTER,
)
from ..models import AttributeDefinition, GeneratedFeature
from .attributes import synthesize
from .geometry import (
    destination,
    intersects,
    line_length_m,
    make_polygon,
    point_in_polygon,
    polygon_area_m2,
    to_geojson,
)
from .models import ResolvedConstraint
from .randomness import RandomValueProvider

logger = logging.getLogger(__name__)

_PREDICATE_ERRORS = (GEOSException, ValueError, TypeError, AttributeError)


def within_range(value: float, low: float, high: float) -> bool:
    """Closed-range test with a small absolute tolerance for float round-off."""
    tol = 1e-6 * max(1.0, abs(low), abs(high))
    return low - tol <= value <= high + tol


def satisfies_constraint(
    constraint: ResolvedConstraint,
    predicate: Callable[[object, BaseGeometry], bool],
    candidate: BaseGeometry,
) -> bool:
    if not constraint.is_constrained:
        return True
    try:
        return bool(predicate(constraint.prepared, candidate))
    except _PREDICATE_ERRORS as exc:
        logger.warning(
            "Constraint check %s failed (%s); accepting candidate unconstrained",
            predicate.__name__, exc,
        )
        return True


def sample_point(
    constraint: ResolvedConstraint,
    rng: RandomValueProvider,
    max_attempts: int = MAX_ATTEMPTS,
) -> Optional[Point]:
    """Uniform point in the bbox that lies inside the constraining polygon."""
    bbox = constraint.bbox
    for _ in range(max_attempts):
        point = Point(
            rng.uniform_float(bbox.west, bbox.east),
            rng.uniform_float(bbox.south, bbox.north),
        )
        if satisfies_constraint(constraint, point_in_polygon, point):
            return point
    logger.debug("Could not place a point inside the area after %d attempts", max_attempts)
    return None


def generate_point(
    constraint: ResolvedConstraint,
    attributes: Sequence[AttributeDefinition],
    rng: RandomValueProvider,
    max_attempts: int = MAX_ATTEMPTS,
) -> Optional[GeneratedFeature]:
    point = sample_point(constraint, rng, max_attempts)
    if point is None:
        return None
    return GeneratedFeature(
        geometry_type="point",
        geometry=to_geojson(point),
        properties=synthesize(attributes, rng),
    )


def generate_line(
    constraint: ResolvedConstraint,
    attributes: Sequence[AttributeDefinition],
    rng: RandomValueProvider,
    min_length: float = DEFAULT_MIN_LENGTH_M,
    max_length: float = DEFAULT_MAX_LENGTH_M,
    max_attempts: int = MAX_ATTEMPTS,
) -> Optional[GeneratedFeature]:
    """Two-point line from a random start, bearing and length (meters).

    The line must touch the constraining polygon, and its measured geodesic
    length must fall within [min_length, max_length].
    """
    for _ in range(max_attempts):
        start = sample_point(constraint, rng, max_attempts)
        if start is None:
            return None

        bearing = rng.uniform_float(0.0, 360.0)
        length = rng.uniform_float(min_length, max_length)
        end = destination(start.x, start.y, bearing, length)
        line = LineString([(start.x, start.y), end])

        if not satisfies_constraint(constraint, intersects, line):
            continue
        measured = line_length_m(line)
        if within_range(measured, min_length, max_length):
            properties = synthesize(attributes, rng)
            properties["length"] = measured
            return GeneratedFeature(
                geometry_type="line",
                geometry=to_geojson(line),
                properties=properties,
            )

    logger.debug(
        "Could not generate line of %.1f-%.1f m after %d attempts",
        min_length, max_length, max_attempts,
    )
    return None


def _irregular_ring(
    lon: float, lat: float, radius_m: float, rng: RandomValueProvider,
) -> list[tuple[float, float]]:
    n_vertices = rng.uniform_int(POLYGON_MIN_VERTICES, POLYGON_MAX_VERTICES)
    ring = []
    for i in range(n_vertices):
        angle = i * 360.0 / n_vertices + rng.uniform_float(
            -POLYGON_ANGLE_JITTER_DEG, POLYGON_ANGLE_JITTER_DEG
        )
        distance = radius_m * (1 + rng.uniform_float(-POLYGON_RADIUS_JITTER, POLYGON_RADIUS_JITTER))
        ring.append(destination(lon, lat, angle, distance))
    ring.append(ring[0])
    return ring


def generate_polygon(
    constraint: ResolvedConstraint,
    attributes: Sequence[AttributeDefinition],
    rng: RandomValueProvider,
    min_area: float = DEFAULT_MIN_AREA_M2,
    max_area: float = DEFAULT_MAX_AREA_M2,
    max_attempts: int = MAX_ATTEMPTS,
) -> Optional[GeneratedFeature]:
    """Irregular, roughly circular polygon of random area (square meters).

    Vertices are spread evenly around a random centre with angle and radius
    jitter. The measured area must fall within [min_area, max_area] and the
    polygon must touch the constraining polygon.
    """
    for _ in range(max_attempts):
        center = sample_point(constraint, rng, max_attempts)
        if center is None:
            return None

        target_area = rng.uniform_float(min_area, max_area)
        # A = pi * r^2
        radius = math.sqrt(max(target_area, 0.0) / math.pi)
        polygon = make_polygon(_irregular_ring(center.x, center.y, radius, rng))

        area = polygon_area_m2(polygon)
        if not within_range(area, min_area, max_area):
            continue
        if satisfies_constraint(constraint, intersects, polygon):
            properties = synthesize(attributes, rng)
            properties["area"] = area
            return GeneratedFeature(
                geometry_type="polygon",
                geometry=to_geojson(polygon),
                properties=properties,
            )

    logger.debug(
        "Could not generate polygon of %.1f-%.1f m2 after %d attempts",
        min_area, max_area, max_attempts,
    )
    return None
