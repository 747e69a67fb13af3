"""Session persistence tools: save_session, load_session."""

import json
import logging
from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..config import default_session_path
from ..core.geojson_io import check_geojson
from ..models import BoundingBox, parse_attribute_schema
from ..state import state, GenerationParams

logger = logging.getLogger(__name__)

_SAVED_AREA_SOURCES = ("drawn", "uploaded")


def _parse_area(area) -> Optional[tuple[dict, str, str]]:
    """(geojson, source, label) from a saved area entry, or None if there is none."""
    if not area:
        return None
    if not isinstance(area, dict):
        raise ValueError("area must be an object")
    geojson = check_geojson(area.get("geojson"))
    source = area.get("source", "uploaded")
    if source not in _SAVED_AREA_SOURCES:
        raise ValueError(f"unknown area source '{source}'")
    return geojson, source, str(area.get("label") or "")


def register_session_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def save_session(path: str | None = None) -> str:
        """Save the current session to a JSON file for later resumption.

        Saves the viewport, the drawn/uploaded area, the attribute schema and
        generation parameters. Does NOT save generated features (export them
        with export_geojson).

        Args:
            path: Where to save. Default: ~/.cache/geomockery/session.json
        """
        save_path = Path(path) if path else default_session_path()
        save_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict = {
            "viewport": state.viewport.as_list() if state.viewport else None,
            "area": None,
            "attributes": [a.model_dump(mode="json") for a in state.attributes],
            "params": state.params.model_dump(),
        }

        if state.area_geojson is not None:
            data["area"] = {
                "source": state.area_source,
                "label": state.area_label,
                "geojson": state.area_geojson,
            }

        with open(save_path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info("Session saved to %s", save_path)
        return f"Session saved to {save_path}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_session(path: str | None = None) -> str:
        """Load a previously saved session from a JSON file.

        Restores the viewport, area, attribute schema and parameters.
        Clears generated features; re-run generate_features after loading.

        Args:
            path: Path to load from. Default: ~/.cache/geomockery/session.json
        """
        load_path = Path(path) if path else default_session_path()

        if not load_path.exists():
            return f"Error: Session file not found at {load_path}"

        try:
            with open(load_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            return f"Error: Invalid session file: {e}"

        try:
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            viewport = BoundingBox.from_list(data["viewport"]) if data.get("viewport") else None
            attributes = parse_attribute_schema(data.get("attributes") or [])
            params = GenerationParams(**data["params"]) if data.get("params") else GenerationParams()
            area = _parse_area(data.get("area"))
        except (ValidationError, ValueError, TypeError) as e:
            return f"Error: Invalid session file: {e}"

        state.viewport = viewport
        state.attributes = attributes
        state.params = params
        if area is not None:
            state.area_geojson, state.area_source, state.area_label = area
        else:
            state.area_geojson = None
            state.area_source = "viewport"
            state.area_label = ""

        state.clear_results()

        restored = []
        if state.viewport:
            restored.append("viewport")
        if state.area_geojson is not None:
            restored.append(f"{state.area_source} area")
        restored.append(f"{len(state.attributes)} attribute(s)")
        restored.append("params")

        return (
            f"Session restored from {load_path}. "
            f"Restored: {', '.join(restored)}. "
            "Still needed: generate_features."
        )
