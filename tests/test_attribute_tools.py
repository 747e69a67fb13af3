"""Tests for attribute schema tools."""
import json
from unittest.mock import MagicMock

from geomockery.state import state


def _get_attribute_tools():
    from geomockery.tools.attributes import register_attribute_tools
    tools = {}
    mock_mcp = MagicMock()
    def capture(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator
    mock_mcp.tool = capture
    register_attribute_tools(mock_mcp)
    return tools


def test_add_each_kind():
    tools = _get_attribute_tools()
    assert "Attribute added" in tools["add_attribute"](name="kind", type="nominal", values=["a", "b"])
    assert "Attribute added" in tools["add_attribute"](name="rank", type="ordinal", values=["lo", "hi"])
    assert "Attribute added" in tools["add_attribute"](name="h", type="quantitative", min=1, max=2, unit="m")
    assert "Attribute added" in tools["add_attribute"](
        name="t", type="temporal", start="2020-01-01", end="2020-02-01")
    assert "Attribute added" in tools["add_attribute"](name="id", type="identifier", prefix="ID-", digits=4)
    assert [a.type for a in state.attributes] == [
        "nominal", "ordinal", "quantitative", "temporal", "identifier",
    ]


def test_add_replaces_same_name():
    tools = _get_attribute_tools()
    tools["add_attribute"](name="kind", type="nominal", values=["a"])
    tools["add_attribute"](name="kind", type="ordinal", values=["x", "y"])
    assert len(state.attributes) == 1
    assert state.attributes[0].type == "ordinal"


def test_add_unknown_kind_is_rejected():
    tools = _get_attribute_tools()
    result = tools["add_attribute"](name="x", type="fuzzy")
    assert result.startswith("Error")
    assert state.attributes == []


def test_add_nominal_without_values_is_rejected():
    tools = _get_attribute_tools()
    assert tools["add_attribute"](name="x", type="nominal").startswith("Error")


def test_add_temporal_with_bad_dates_is_rejected():
    tools = _get_attribute_tools()
    result = tools["add_attribute"](name="t", type="temporal", start="2021-01-01", end="2020-01-01")
    assert result.startswith("Error")


def test_add_keeps_existing_temporal_attribute():
    tools = _get_attribute_tools()
    tools["add_attribute"](name="t", type="temporal", start="2020-01-01", end="2020-02-01")
    assert "Attribute added" in tools["add_attribute"](name="k", type="nominal", values=["a"])
    assert [a.name for a in state.attributes] == ["t", "k"]


def test_set_attribute_schema():
    tools = _get_attribute_tools()
    schema = [
        {"name": "kind", "type": "nominal", "values": ["a", "b"]},
        {"name": "id", "type": "identifier", "values": ["X1", "X2"]},
    ]
    result = tools["set_attribute_schema"](schema_json=json.dumps(schema))
    assert "2 attribute" in result
    assert state.attributes[1].values == ["X1", "X2"]


def test_set_attribute_schema_rejects_non_list():
    tools = _get_attribute_tools()
    assert tools["set_attribute_schema"](schema_json='{"name": "x"}').startswith("Error")


def test_set_attribute_schema_rejects_bad_json():
    tools = _get_attribute_tools()
    assert tools["set_attribute_schema"](schema_json="[").startswith("Error")


def test_remove_and_clear():
    tools = _get_attribute_tools()
    tools["add_attribute"](name="a", type="nominal", values=[1])
    tools["add_attribute"](name="b", type="nominal", values=[2])
    assert "removed" in tools["remove_attribute"](name="a")
    assert [a.name for a in state.attributes] == ["b"]
    assert tools["remove_attribute"](name="zzz").startswith("Error")
    tools["clear_attributes"]()
    assert state.attributes == []


def test_list_attributes():
    tools = _get_attribute_tools()
    assert tools["list_attributes"]() == "No attributes defined."
    tools["add_attribute"](name="h", type="quantitative", min=0, max=10, unit="m")
    tools["add_attribute"](name="id", type="identifier", prefix="P", digits=3)
    listing = tools["list_attributes"]()
    assert "h (quantitative): 0–10 m" in listing
    assert "id (identifier): 'P' + 3 characters" in listing
