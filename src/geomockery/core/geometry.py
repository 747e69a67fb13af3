"""Geometric predicates and geodesic measurements.

Coordinates are (lon, lat) degrees on WGS84. Lengths are meters, areas square
meters, bearings degrees clockwise from north.
"""

import math
from typing import Any, Iterable

from pyproj import Geod
from shapely.geometry import LineString, Point, Polygon, mapping, shape
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import unary_union

from ..models import BoundingBox

GEOD = Geod(ellps="WGS84")

POLYGONAL_TYPES = ("Polygon", "MultiPolygon")


def to_geometry(geojson_geometry: dict[str, Any]) -> BaseGeometry:
    """Build a shapely geometry from a GeoJSON geometry mapping."""
    return shape(geojson_geometry)


def to_geojson(geometry: BaseGeometry) -> dict[str, Any]:
    """GeoJSON geometry mapping with plain lists instead of tuples."""
    def _listify(value):
        if isinstance(value, (list, tuple)):
            return [_listify(v) for v in value]
        return value

    data = mapping(geometry)
    return {"type": data["type"], "coordinates": _listify(data["coordinates"])}


def is_polygonal(geometry: BaseGeometry) -> bool:
    return geometry.geom_type in POLYGONAL_TYPES


def bbox_of(geometry: BaseGeometry) -> BoundingBox:
    west, south, east, north = geometry.bounds
    return BoundingBox(west=west, south=south, east=east, north=north)


def union_polygons(polygons: Iterable[BaseGeometry]) -> BaseGeometry:
    """Union polygonal geometries into one (Multi)Polygon."""
    return unary_union(list(polygons))


def point_in_polygon(polygon, point: Point) -> bool:
    """True if the point lies inside or on the boundary of ``polygon``.

    ``polygon`` may be a plain or prepared shapely geometry.
    """
    return polygon.covers(point)


def intersects(polygon, geometry: BaseGeometry) -> bool:
    return polygon.intersects(geometry)


def destination(lon: float, lat: float, bearing_deg: float, distance_m: float) -> tuple[float, float]:
    """Geodesic destination from (lon, lat) along a bearing.

    The longitude is kept continuous with ``lon`` instead of being wrapped
    into [-180, 180], so shapes crossing the antimeridian stay compact
    (e.g. 180.001 rather than -179.999).
    """
    lon2, lat2, _ = GEOD.fwd(lon, lat, bearing_deg, distance_m)
    lon2 = lon + ((float(lon2) - lon + 180.0) % 360.0 - 180.0)
    return lon2, float(lat2)


def line_length_m(line: LineString) -> float:
    return float(GEOD.geometry_length(line))


def polygon_area_m2(polygon: Polygon) -> float:
    area, _ = GEOD.geometry_area_perimeter(polygon)
    return abs(float(area))


def make_polygon(ring: list[tuple[float, float]]) -> Polygon:
    """Counter-clockwise polygon from a closed exterior ring."""
    return orient(Polygon(ring), sign=1.0)


def expand_bbox(bbox: BoundingBox, padding_m: float) -> BoundingBox:
    """Grow a bounding box by ``padding_m`` meters on every side."""
    # 1 degree latitude ~ 111,000 meters
    lat_padding = padding_m / 111_000.0
    cos_lat = max(math.cos(math.radians(bbox.center_lat)), 1e-6)
    lon_padding = padding_m / (111_000.0 * cos_lat)

    return BoundingBox(
        west=max(-180.0, bbox.west - lon_padding),
        south=max(-90.0, bbox.south - lat_padding),
        east=min(180.0, bbox.east + lon_padding),
        north=min(90.0, bbox.north + lat_padding),
    )


def approx_span_m(bbox: BoundingBox) -> tuple[float, float]:
    """Approximate (east-west, north-south) extent of a bbox in meters."""
    lat_m = bbox.lat_range * 111_000
    lon_m = bbox.lon_range * 111_000 * abs(math.cos(math.radians(bbox.center_lat)))
    return lon_m, lat_m
