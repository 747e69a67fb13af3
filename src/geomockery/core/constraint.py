"""Resolution of drawn or uploaded areas into one constraining polygon."""

import logging
from typing import Any, Optional

from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry
from shapely.validation import explain_validity

from ..config import WORLD_BBOX
from ..models import AreaSource, BoundingBox
from .geometry import bbox_of, is_polygonal, to_geometry, union_polygons
from .models import ResolvedConstraint

logger = logging.getLogger(__name__)

_GEOMETRY_ERRORS = (GEOSException, ValueError, TypeError, KeyError, AttributeError, IndexError)


def _parse_geometry(geojson_geometry: Any) -> BaseGeometry:
    """Shapely geometry with a valid lon/lat extent, or raise ValueError."""
    if not isinstance(geojson_geometry, dict):
        raise ValueError("geometry is not an object")
    try:
        geometry = to_geometry(geojson_geometry)
    except _GEOMETRY_ERRORS as exc:
        raise ValueError(f"unreadable {geojson_geometry.get('type')} geometry: {exc}") from exc
    if geometry.is_empty:
        raise ValueError(f"empty {geometry.geom_type} geometry")
    bbox_of(geometry)
    return geometry


def _fallback_bbox(viewport: Optional[BoundingBox]) -> BoundingBox:
    return viewport if viewport is not None else BoundingBox.from_list(WORLD_BBOX)


def _resolve_collection(collection: dict, warnings: list[str]) -> Optional[BaseGeometry]:
    polygons: list[BaseGeometry] = []
    others: list[BaseGeometry] = []

    features = collection.get("features")
    if not isinstance(features, list):
        features = []
    for i, feature in enumerate(features):
        geojson_geometry = feature.get("geometry") if isinstance(feature, dict) else None
        try:
            geometry = _parse_geometry(geojson_geometry)
        except ValueError as exc:
            logger.warning("Skipping feature %d of constraint collection: %s", i, exc)
            warnings.append(f"Skipped feature {i}: {exc}")
            continue
        if is_polygonal(geometry):
            polygons.append(geometry)
        else:
            others.append(geometry)

    if len(polygons) == 1:
        return polygons[0]

    if len(polygons) > 1:
        try:
            merged = union_polygons(polygons)
            if merged.is_empty:
                raise ValueError("union is empty")
            return merged
        except (GEOSException, ValueError) as exc:
            logger.warning("Failed to union %d polygons, using first polygon: %s", len(polygons), exc)
            warnings.append(
                f"Could not merge {len(polygons)} polygons ({exc}); "
                f"only the first polygon constrains generation"
            )
            return polygons[0]

    logger.warning("No polygon features found in FeatureCollection")
    warnings.append("No polygon features found; generating within the bounding box only")
    if others:
        try:
            return union_polygons(others)
        except (GEOSException, ValueError) as exc:
            logger.warning("Could not combine non-polygon features: %s", exc)
            return others[0]
    return None


def resolve_constraint(
    raw: Any,
    viewport: Optional[BoundingBox] = None,
    source: AreaSource = "viewport",
) -> ResolvedConstraint:
    """Normalize a constraining GeoJSON object into (bbox, polygon).

    ``raw`` may be None, a FeatureCollection, a Feature or a bare geometry.
    Multiple polygons are unioned; when the union fails the first polygon is
    used and a warning is recorded. Non-polygonal input only contributes its
    bounding box. When nothing usable remains, the viewport (or the whole
    world) bounds generation.
    """
    if raw is None:
        return ResolvedConstraint(bbox=_fallback_bbox(viewport), polygon=None, source="viewport")

    warnings: list[str] = []
    geometry: Optional[BaseGeometry] = None

    if not isinstance(raw, dict):
        logger.warning("Ignoring constraining area of type %s", type(raw).__name__)
        warnings.append(f"Ignored malformed area: expected a GeoJSON object, got {type(raw).__name__}")
    elif raw.get("type") == "FeatureCollection":
        geometry = _resolve_collection(raw, warnings)
    else:
        geojson_geometry = raw.get("geometry") if raw.get("type") == "Feature" else raw
        try:
            geometry = _parse_geometry(geojson_geometry)
        except ValueError as exc:
            logger.warning("Ignoring malformed constraining geometry: %s", exc)
            warnings.append(f"Ignored malformed area geometry: {exc}")

    if geometry is None:
        warnings.append("No usable area geometry; using the viewport bounds")
        return ResolvedConstraint(
            bbox=_fallback_bbox(viewport), polygon=None, source=source, warnings=warnings,
        )

    bbox = bbox_of(geometry)

    if not is_polygonal(geometry):
        if raw.get("type") != "FeatureCollection":
            warnings.append(
                f"Area is a {geometry.geom_type}, not a polygon; generating within its bounding box only"
            )
        return ResolvedConstraint(bbox=bbox, polygon=None, source=source, warnings=warnings)

    if not geometry.is_valid:
        reason = explain_validity(geometry)
        logger.warning("Constraining polygon is invalid: %s", reason)
        warnings.append(f"Constraining polygon is invalid ({reason}); results may be approximate")

    return ResolvedConstraint(bbox=bbox, polygon=geometry, source=source, warnings=warnings)
