"""GeoJSON FeatureCollection export."""

import json
from typing import Iterable

from ..models import GeneratedFeature


def feature_collection(features: Iterable[GeneratedFeature], preview: bool = False) -> dict:
    """Wrap generated features in a FeatureCollection.

    With ``preview`` every feature carries ``preview: true`` so renderers can
    style provisional output differently.
    """
    extra = {"preview": True} if preview else None
    return {
        "type": "FeatureCollection",
        "features": [f.to_geojson(extra) for f in features],
    }


def export_geojson(features: list[GeneratedFeature], output_path: str, indent: int = 2) -> dict:
    """Write features as a .geojson file."""
    collection = feature_collection(features)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(collection, f, indent=indent)
    return {"features": len(collection["features"]), "path": output_path}
