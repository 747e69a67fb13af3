"""Tests for GeoJSON export and the export tools."""
import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from geomockery.exporters.geojson import export_geojson, feature_collection
from geomockery.models import GeneratedFeature
from geomockery.state import state


def _features(n=3):
    return [
        GeneratedFeature(
            geometry_type="point",
            geometry={"type": "Point", "coordinates": [i * 0.001, 0.0]},
            properties={"kind": "a", "n": i},
        )
        for i in range(n)
    ]


def _get_export_tools():
    from geomockery.tools.export import register_export_tools
    tools = {}
    mock_mcp = MagicMock()
    def capture(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator
    mock_mcp.tool = capture
    register_export_tools(mock_mcp)
    return tools


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    return tmp_path


def test_feature_collection_shape():
    fc = feature_collection(_features(2))
    assert fc["type"] == "FeatureCollection"
    assert len(fc["features"]) == 2
    assert fc["features"][1]["properties"] == {"kind": "a", "n": 1}
    assert "preview" not in fc["features"][0]["properties"]


def test_feature_collection_preview_flag():
    fc = feature_collection(_features(2), preview=True)
    assert all(f["properties"]["preview"] is True for f in fc["features"])


def test_preview_does_not_mutate_feature():
    features = _features(1)
    feature_collection(features, preview=True)
    assert "preview" not in features[0].properties


def test_export_geojson_writes_file(tmp_path):
    path = tmp_path / "out.geojson"
    result = export_geojson(_features(3), str(path))
    assert result == {"features": 3, "path": str(path)}
    data = json.loads(path.read_text())
    assert data["type"] == "FeatureCollection"
    assert data["features"][2]["geometry"]["coordinates"] == [0.002, 0.0]


def test_export_tool_requires_features(home):
    tools = _get_export_tools()
    result = tools["export_geojson"](output_path=str(home / "out.geojson"))
    assert result.startswith("Error")
    assert "generate_features" in result


def test_export_tool_writes_inside_home(home):
    state.features = _features(4)
    tools = _get_export_tools()
    path = home / "nested" / "out.geojson"
    result = tools["export_geojson"](output_path=str(path))
    assert "4 features" in result
    assert path.exists()


def test_export_tool_rejects_path_outside_home(home, tmp_path_factory):
    state.features = _features(1)
    outside = tmp_path_factory.mktemp("elsewhere") / "out.geojson"
    tools = _get_export_tools()
    result = tools["export_geojson"](output_path=str(outside))
    assert result.startswith("Error")
    assert "outside the home directory" in result
    assert not outside.exists()


def test_get_features_geojson_inline():
    state.features = _features(2)
    tools = _get_export_tools()
    data = json.loads(tools["get_features_geojson"](preview=True))
    assert len(data["features"]) == 2
    assert data["features"][0]["properties"]["preview"] is True


def test_get_features_geojson_refuses_large_batches():
    state.features = _features(1001)
    tools = _get_export_tools()
    result = tools["get_features_geojson"]()
    assert result.startswith("Error")
    assert "export_geojson" in result
