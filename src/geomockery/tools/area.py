"""Area definition tools: set_viewport, set_drawn_area, load_area_from_file,
clear_area, validate_area, geocode_place, select_geocode_result."""

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..core.constraint import resolve_constraint
from ..core.geojson_io import feature_count, load_geojson_file, parse_geojson_text
from ..core.geometry import approx_span_m, expand_bbox, polygon_area_m2
from ..core.models import ResolvedConstraint
from ..models import BoundingBox, GeocodeCandidate


def resolve_session_area() -> ResolvedConstraint:
    """Resolve the session's active area into a bbox and optional polygon."""
    if state.area_source == "viewport" or state.area_geojson is None:
        return resolve_constraint(None, viewport=state.viewport)
    return resolve_constraint(state.area_geojson, viewport=state.viewport, source=state.area_source)


def _describe_bbox(bbox: BoundingBox) -> str:
    lon_m, lat_m = approx_span_m(bbox)
    return (
        f"W={bbox.west:.6f}, S={bbox.south:.6f}, E={bbox.east:.6f}, N={bbox.north:.6f} "
        f"(~{lon_m:.0f}m x {lat_m:.0f}m)"
    )


def _set_viewport(bbox: BoundingBox) -> None:
    state.viewport = bbox
    state.area_source = "viewport"
    state.pending_geocode_candidates = []
    state.clear_results()


def _set_area_from_candidate(candidate: GeocodeCandidate) -> BoundingBox:
    bbox = BoundingBox(
        west=candidate.bbox_west,
        south=candidate.bbox_south,
        east=candidate.bbox_east,
        north=candidate.bbox_north,
    )
    _set_viewport(bbox)
    return bbox


def register_area_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_viewport(
        lat: float | None = None,
        lon: float | None = None,
        radius_m: float | None = None,
        north: float | None = None,
        south: float | None = None,
        east: float | None = None,
        west: float | None = None,
    ) -> str:
        """Set the viewport bounding box and generate within it.

        Either provide (lat, lon, radius_m) for a box around a centre point,
        or (north, south, east, west) for an explicit bounding box.
        Switches the generation area to the viewport; a loaded drawn/uploaded
        area is kept and can be re-activated with set_drawn_area or
        load_area_from_file.

        **Next:** add_attribute (optional), then generate_features.

        Args:
            lat: Center latitude (degrees). Use with lon and radius_m.
            lon: Center longitude (degrees). Use with lat and radius_m.
            radius_m: Half-width of the box in meters around the center point.
            north/south/east/west: Explicit bounding box (degrees).
        """
        try:
            if lat is not None and lon is not None and radius_m is not None:
                bbox = expand_bbox(
                    BoundingBox(west=lon, south=lat, east=lon, north=lat), padding_m=radius_m,
                )
            elif all(v is not None for v in [north, south, east, west]):
                bbox = BoundingBox(west=west, south=south, east=east, north=north)
            else:
                return "Error: Provide either (lat, lon, radius_m) or (north, south, east, west)."
        except ValueError as e:
            return f"Error: {e}"

        _set_viewport(bbox)
        return f"Viewport set: {_describe_bbox(bbox)}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_drawn_area(geojson: str, label: str = "drawn area") -> str:
        """Constrain generation to a drawn shape given as GeoJSON text.

        Accepts a Polygon/MultiPolygon geometry, a Feature or a FeatureCollection.
        Several polygons are merged into one area.

        **Next:** validate_area (optional), then generate_features.

        Args:
            geojson: GeoJSON text of the drawn shape(s).
            label: Name shown in status output.
        """
        try:
            data = parse_geojson_text(geojson)
        except ValueError as e:
            return f"Error: {e}"

        state.area_geojson = data
        state.area_source = "drawn"
        state.area_label = label
        state.clear_results()
        return f"Drawn area set ({feature_count(data)} feature(s))."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_area_from_file(file_path: str) -> str:
        """Load a GeoJSON file and use its polygons as the generation area.

        **Next:** validate_area (optional), then generate_features.

        Args:
            file_path: Absolute path to a .geojson / .json file.
        """
        try:
            data = load_geojson_file(file_path)
        except ValueError as e:
            return f"Error: {e}"

        state.area_geojson = data
        state.area_source = "uploaded"
        state.area_label = file_path
        state.clear_results()
        count = feature_count(data)
        return f"Imported {count} feature{'' if count == 1 else 's'} from {file_path}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def clear_area() -> str:
        """Remove the drawn/uploaded area and fall back to the viewport."""
        state.area_geojson = None
        state.area_label = ""
        state.area_source = "viewport"
        state.clear_results()
        return "Area cleared. Generation will use the viewport."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def validate_area() -> str:
        """Resolve the current area and report its extent and any problems.

        Returns warnings but does not block generation.
        """
        try:
            resolved = resolve_session_area()
        except ValueError as e:
            return f"Error: {e}"

        lines = [f"Area source: {resolved.source}", f"Bounds: {_describe_bbox(resolved.bbox)}"]
        if resolved.polygon is not None:
            area_km2 = sum(
                polygon_area_m2(p) for p in getattr(resolved.polygon, "geoms", [resolved.polygon])
            ) / 1e6
            lines.append(f"Constraining {resolved.polygon.geom_type}: ~{area_km2:.3f} km2")
        else:
            lines.append("No constraining polygon (bounding box only).")

        warnings = list(resolved.warnings)
        if state.viewport is None and resolved.source == "viewport":
            warnings.append(
                "No viewport set; bounds default to the whole world. "
                "Call set_viewport before generate_features."
            )
        lon_m, lat_m = approx_span_m(resolved.bbox)
        if min(lon_m, lat_m) < 1:
            warnings.append("Area is degenerate (under 1m across); most generation attempts will fail.")

        if warnings:
            lines.append("Warnings: " + " | ".join(warnings))
        else:
            lines.append("Area looks good.")
        return "\n".join(lines)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def geocode_place(query: str, limit: int = 5) -> str:
        """Search for a place by name and use its bounding box as the viewport.

        - 1 result: the viewport is set automatically.
        - 2+ results: raises an error with a numbered list. Present it to the user,
          wait for them to reply with a number, then call select_geocode_result.

        Args:
            query: Place name to search for (e.g., "Central Park", "Lyon, France").
            limit: Maximum number of candidates to return (1–10, default 5).
        """
        limit = max(1, min(10, limit))

        try:
            response = httpx.get(
                "https://nominatim.openstreetmap.org/search",
                params={"q": query, "format": "json", "limit": limit},
                headers={"User-Agent": "geomockery/0.1"},
                timeout=10.0,
            )
            response.raise_for_status()
            results = response.json()
        except httpx.HTTPStatusError as exc:
            return f"Error: Nominatim returned HTTP {exc.response.status_code}."
        except Exception as exc:
            return f"Error contacting geocoding service: {exc}"

        if not results:
            return f"No locations found for '{query}'. Try a more specific name."

        candidates = []
        for item in results:
            bbox = item.get("boundingbox", [])
            # Nominatim boundingbox order: [south, north, west, east]
            candidates.append(
                GeocodeCandidate(
                    display_name=item["display_name"],
                    lat=float(item["lat"]),
                    lon=float(item["lon"]),
                    place_type=item.get("type", "unknown"),
                    bbox_south=float(bbox[0]) if len(bbox) >= 4 else float(item["lat"]),
                    bbox_north=float(bbox[1]) if len(bbox) >= 4 else float(item["lat"]),
                    bbox_west=float(bbox[2]) if len(bbox) >= 4 else float(item["lon"]),
                    bbox_east=float(bbox[3]) if len(bbox) >= 4 else float(item["lon"]),
                )
            )

        if len(candidates) == 1:
            c = candidates[0]
            bbox = _set_area_from_candidate(c)
            return f"Found 1 result: '{c.display_name}' (auto-selected). Viewport set: {_describe_bbox(bbox)}"

        state.pending_geocode_candidates = candidates

        lines = [f"Found {len(candidates)} location(s) for '{query}':\n"]
        for i, c in enumerate(candidates, 1):
            lines.append(
                f"{i}. {c.display_name}\n"
                f"   Type: {c.place_type} | Center: {c.lat:.5f}, {c.lon:.5f}"
            )
        lines.append(
            f"\nUser input required: ask the user which number (1–{len(candidates)}) "
            "they want, then call select_geocode_result with that number."
        )
        raise ValueError("\n".join(lines))

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def select_geocode_result(number: int) -> str:
        """Select a geocode candidate by number and use it as the viewport.

        **Requires:** geocode_place called first with multiple results.

        Args:
            number: 1-based index of the candidate the user selected.
        """
        if not state.pending_geocode_candidates:
            return "Error: No geocode search results pending. Call geocode_place first."

        n = len(state.pending_geocode_candidates)
        if number < 1 or number > n:
            return f"Error: Invalid selection {number}. Choose a number between 1 and {n}."

        candidate = state.pending_geocode_candidates[number - 1]
        bbox = _set_area_from_candidate(candidate)
        return f"Viewport set from '{candidate.display_name}': {_describe_bbox(bbox)}"
