"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, area: bool = False, features: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, area=True, features=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if area and state.viewport is None and state.area_geojson is None:
        raise ValueError(
            "Set an area first with set_viewport, set_drawn_area or load_area_from_file."
        )
    if features and not state.features:
        raise ValueError(
            "Generate features first with generate_features."
        )
