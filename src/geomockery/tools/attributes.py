"""Attribute schema tools: add_attribute, set_attribute_schema, remove_attribute,
list_attributes, clear_attributes."""

import json
from typing import Any, Optional, Union

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..models import parse_attribute_schema


def _describe(attr) -> str:
    if attr.type in ("nominal", "ordinal"):
        return f"{attr.name} ({attr.type}): {', '.join(str(v) for v in attr.values)}"
    if attr.type == "quantitative":
        unit = f" {attr.range.unit}" if attr.range.unit else ""
        return f"{attr.name} (quantitative): {attr.range.min:g}–{attr.range.max:g}{unit}"
    if attr.type == "temporal":
        return (
            f"{attr.name} (temporal): {attr.range.start.isoformat()} – {attr.range.end.isoformat()}"
        )
    if attr.values:
        return f"{attr.name} (identifier): one of {len(attr.values)} value(s)"
    return f"{attr.name} (identifier): '{attr.format.prefix}' + {attr.format.digits} characters"


def register_attribute_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def add_attribute(
        name: str,
        type: str,
        values: Optional[list[Union[str, int, float, bool]]] = None,
        min: Optional[float] = None,
        max: Optional[float] = None,
        unit: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        prefix: Optional[str] = None,
        digits: Optional[int] = None,
    ) -> str:
        """Add (or replace) one attribute in the schema.

        Types and their arguments:
        - nominal / ordinal: values (ordinal values listed lowest to highest)
        - quantitative: min, max, optional unit
        - temporal: start, end (ISO dates or timestamps)
        - identifier: prefix and digits, or values to pick from

        **Next:** generate_features.

        Args:
            name: Property name on generated features.
            type: nominal, ordinal, quantitative, temporal or identifier.
        """
        raw: dict[str, Any] = {"name": name, "type": type}
        if type in ("nominal", "ordinal"):
            raw["values"] = values or []
        elif type == "quantitative":
            raw["range"] = {
                "min": 0.0 if min is None else min,
                "max": 100.0 if max is None else max,
                "unit": unit,
            }
        elif type == "temporal":
            raw["range"] = {"start": start, "end": end}
        elif type == "identifier":
            fmt: dict[str, Any] = {}
            if prefix is not None:
                fmt["prefix"] = prefix
            if digits is not None:
                fmt["digits"] = digits
            raw["format"] = fmt
            if values:
                raw["values"] = values

        others = [a.model_dump() for a in state.attributes if a.name != name.strip()]
        try:
            schema = parse_attribute_schema(others + [raw])
        except ValueError as e:
            return f"Error: {e}"

        state.attributes = schema
        state.clear_results()
        return f"Attribute added: {_describe(schema[-1])}. Schema has {len(schema)} attribute(s)."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def set_attribute_schema(schema_json: str) -> str:
        """Replace the whole attribute schema with a JSON list of definitions.

        Example:
            [{"name": "kind", "type": "nominal", "values": ["a", "b"]},
             {"name": "height", "type": "quantitative", "range": {"min": 1, "max": 30, "unit": "m"}},
             {"name": "seen", "type": "temporal", "range": {"start": "2020-01-01", "end": "2024-12-31"}},
             {"name": "id", "type": "identifier", "format": {"prefix": "ID-", "digits": 6}}]

        Args:
            schema_json: JSON array of attribute definitions.
        """
        try:
            raw = json.loads(schema_json)
        except json.JSONDecodeError as e:
            return f"Error: Invalid JSON: {e}"
        if not isinstance(raw, list):
            return "Error: Attribute schema must be a JSON array."

        try:
            schema = parse_attribute_schema(raw)
        except ValueError as e:
            return f"Error: {e}"

        state.attributes = schema
        state.clear_results()
        return f"Attribute schema set: {len(schema)} attribute(s)."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def remove_attribute(name: str) -> str:
        """Remove an attribute from the schema by name."""
        remaining = [a for a in state.attributes if a.name != name]
        if len(remaining) == len(state.attributes):
            return f"Error: No attribute named '{name}'."
        state.attributes = remaining
        state.clear_results()
        return f"Attribute '{name}' removed. Schema has {len(remaining)} attribute(s)."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def list_attributes() -> str:
        """List the attribute schema."""
        if not state.attributes:
            return "No attributes defined."
        return "\n".join(f"- {_describe(a)}" for a in state.attributes)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def clear_attributes() -> str:
        """Remove all attributes from the schema."""
        state.attributes = []
        state.clear_results()
        return "Attribute schema cleared."
