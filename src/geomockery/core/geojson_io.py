"""Reading and checking user-supplied GeoJSON area definitions."""

import json
from pathlib import Path
from typing import Any

GEOMETRY_TYPES = (
    "Point", "LineString", "Polygon",
    "MultiPoint", "MultiLineString", "MultiPolygon",
    "GeometryCollection",
)

# Only the first few features of a collection are structurally checked
_CHECKED_FEATURES = 3


def check_geojson(data: Any) -> dict:
    """Raise ValueError with a descriptive message if ``data`` is not usable GeoJSON."""
    if not isinstance(data, dict):
        raise ValueError("Invalid GeoJSON: not a valid object")

    gtype = data.get("type")
    if not gtype:
        raise ValueError('Invalid GeoJSON: missing "type" property')

    if gtype == "FeatureCollection":
        features = data.get("features")
        if not isinstance(features, list):
            raise ValueError('Invalid FeatureCollection: "features" must be an array')
        if not features:
            raise ValueError("FeatureCollection is empty - no features to import")
        for i, feature in enumerate(features[:_CHECKED_FEATURES]):
            if not isinstance(feature, dict):
                raise ValueError(f"Invalid feature at index {i}: not an object")
            if feature.get("type") != "Feature":
                raise ValueError(f'Invalid feature at index {i}: type must be "Feature"')
            if not feature.get("geometry"):
                raise ValueError(f"Invalid feature at index {i}: missing geometry")
    elif gtype == "Feature":
        geometry = data.get("geometry")
        if not geometry:
            raise ValueError('Feature is missing "geometry" property')
        if not isinstance(geometry, dict) or not geometry.get("type"):
            raise ValueError('Feature geometry is missing "type" property')
    elif gtype in GEOMETRY_TYPES:
        if gtype != "GeometryCollection" and not data.get("coordinates"):
            raise ValueError(f'{gtype} geometry is missing "coordinates" property')
    else:
        raise ValueError(
            f'Unsupported GeoJSON type: "{gtype}". Supported types: '
            f"FeatureCollection, Feature, {', '.join(GEOMETRY_TYPES)}"
        )
    return data


def parse_geojson_text(text: str) -> dict:
    """Parse GeoJSON text and check its structure."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        raise ValueError("Invalid JSON format. Please ensure the file contains valid JSON.") from None
    return check_geojson(data)


def load_geojson_file(file_path: str) -> dict:
    path = Path(file_path)
    if not path.is_file():
        raise ValueError(f"GeoJSON file not found: {file_path}")
    return parse_geojson_text(path.read_text(encoding="utf-8"))


def feature_count(data: dict) -> int:
    if data.get("type") == "FeatureCollection":
        return len(data.get("features", []))
    return 1
