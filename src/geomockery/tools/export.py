"""Export tools: export_geojson, get_features_geojson."""

import json
import logging
import os
from pathlib import Path
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..exporters.geojson import export_geojson as do_export_geojson, feature_collection
from ._prereqs import require_state

logger = logging.getLogger(__name__)

# Inline responses larger than this are refused; export to a file instead
_MAX_INLINE_FEATURES = 1000


def _validate_output_path(output_path: str) -> None:
    """Raise ValueError if output_path resolves outside the user's home directory."""
    resolved = Path(output_path).resolve()
    home = Path.home().resolve()
    try:
        resolved.relative_to(home)
    except ValueError:
        raise ValueError(
            f"Output path {output_path!r} is outside the home directory. "
            "Use a path within your home directory."
        )


def register_export_tools(mcp: FastMCP):

    @mcp.tool()
    def export_geojson(output_path: str) -> str:
        """Export the generated features as a GeoJSON FeatureCollection.

        Args:
            output_path: Where to save the .geojson file (absolute path)
        """
        try:
            require_state(state, features=True)
            _validate_output_path(output_path)
        except ValueError as e:
            return f"Error: {e}"

        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        result = do_export_geojson(state.features, output_path)
        logger.info("Exported %d features to %s", result["features"], output_path)
        return f"GeoJSON exported to {output_path} ({result['features']} features)"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_features_geojson(preview: bool = False) -> str:
        """Return the generated features as GeoJSON text.

        Limited to 1000 features; use export_geojson for larger batches.

        Args:
            preview: Tag every feature with "preview": true for map styling.
        """
        try:
            require_state(state, features=True)
        except ValueError as e:
            return f"Error: {e}"
        if len(state.features) > _MAX_INLINE_FEATURES:
            return (
                f"Error: {len(state.features)} features is too many to return inline "
                f"(limit {_MAX_INLINE_FEATURES}). Use export_geojson."
            )
        return json.dumps(feature_collection(state.features, preview=preview))
