"""Generation tools: set_generation_params, generate_features, clear_features."""

import threading
from functools import partial

import anyio
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..config import MAX_FEATURES
from ..state import state, BatchSummary
from ..core.batch import run_request
from ..models import GenerationRequest
from ._prereqs import require_state
from .area import resolve_session_area


def register_generate_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_generation_params(
        geometry_type: str | None = None,
        quantity: int | None = None,
        min_length_m: float | None = None,
        max_length_m: float | None = None,
        min_area_m2: float | None = None,
        max_area_m2: float | None = None,
        max_attempts: int | None = None,
        seed: int | None = None,
    ) -> str:
        """Set default parameters for generate_features. Only provided values change.

        Args:
            geometry_type: point, line or polygon.
            quantity: Number of features (1–50000).
            min_length_m/max_length_m: Line length range in meters.
            min_area_m2/max_area_m2: Polygon area range in square meters.
            max_attempts: Retry budget per feature (default 100).
            seed: Random seed for reproducible output.
        """
        updates = {
            k: v for k, v in {
                "geometry_type": geometry_type,
                "quantity": quantity,
                "min_length_m": min_length_m,
                "max_length_m": max_length_m,
                "min_area_m2": min_area_m2,
                "max_area_m2": max_area_m2,
                "max_attempts": max_attempts,
                "seed": seed,
            }.items() if v is not None
        }
        try:
            state.params = state.params.model_validate({**state.params.model_dump(), **updates})
        except ValidationError as e:
            return f"Error: {e}"
        return f"Generation parameters updated: {', '.join(sorted(updates)) or 'nothing changed'}."

    @mcp.tool()
    async def generate_features(
        ctx: Context,
        geometry_type: str | None = None,
        quantity: int | None = None,
        seed: int | None = None,
    ) -> str:
        """Generate random features inside the current area.

        Uses the session parameters (see set_generation_params) and the attribute
        schema. Individual features that cannot satisfy the constraints are
        counted as failures; the run continues. Reports progress while running.
        If the request is cancelled, generation stops after the current feature.

        **Requires:** set_viewport, set_drawn_area or load_area_from_file.
        **Next:** export_geojson.

        Args:
            geometry_type: Override the session geometry type (point, line, polygon).
            quantity: Override the session quantity (capped at 50000).
            seed: Override the session random seed.
        """
        try:
            require_state(state, area=True)
        except ValueError as e:
            return f"Error: {e}"

        params = state.params
        try:
            request = GenerationRequest(
                geometry_type=geometry_type or params.geometry_type,
                quantity=min(quantity if quantity is not None else params.quantity, MAX_FEATURES),
                attributes=state.attributes,
                area_constraint=state.area_source,
                length_range=params.length_range,
                area_range=params.area_range,
                max_attempts=params.max_attempts,
                seed=seed if seed is not None else params.seed,
            )
        except ValidationError as e:
            return f"Error: {e}"

        resolved = resolve_session_area()
        cancel = threading.Event()

        def report(done: int, total: int) -> None:
            if not cancel.is_set():
                anyio.from_thread.run(ctx.report_progress, done, total)

        # Generation is CPU-bound; run it off the event loop and stop it at the
        # next feature if this task is cancelled.
        try:
            result = await anyio.to_thread.run_sync(
                partial(run_request, request, resolved, should_cancel=cancel.is_set, on_progress=report),
                abandon_on_cancel=True,
            )
        finally:
            cancel.set()

        state.features = result.features
        state.last_batch = BatchSummary(
            geometry_type=request.geometry_type,
            requested=request.quantity,
            success_count=result.success_count,
            fail_count=result.fail_count,
            cancelled=result.cancelled,
            warnings=result.warnings,
        )

        notes = f" Warnings: {' | '.join(result.warnings)}" if result.warnings else ""
        if not result.features:
            return (
                "Error: No features were generated. Check the area and the "
                f"length/area constraints and try again.{notes}"
            )
        return (
            f"Generated {result.success_count} {request.geometry_type} feature(s), "
            f"{result.fail_count} failed ({resolved.source} area).{notes}"
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def clear_features() -> str:
        """Discard the generated features."""
        state.clear_results()
        return "Generated features cleared."
