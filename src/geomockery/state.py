"""Session state for the geomockery MCP server.

Holds everything for the current generation session: the viewport, the
drawn or uploaded constraining area, the attribute schema, generation
parameters and the most recently generated features.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import (
    DEFAULT_MAX_AREA_M2,
    DEFAULT_MAX_LENGTH_M,
    DEFAULT_MIN_AREA_M2,
    DEFAULT_MIN_LENGTH_M,
    DEFAULT_QUANTITY,
    MAX_ATTEMPTS,
    MAX_FEATURES,
)
from .models import (
    AreaSource,
    AttributeDefinition,
    BoundingBox,
    GeneratedFeature,
    GeocodeCandidate,
    GeometryType,
    MeasureRange,
)


class GenerationParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    geometry_type: GeometryType = "point"
    quantity: int = Field(default=DEFAULT_QUANTITY, ge=1, le=MAX_FEATURES)
    min_length_m: float = Field(default=DEFAULT_MIN_LENGTH_M, ge=0)
    max_length_m: float = Field(default=DEFAULT_MAX_LENGTH_M, ge=0)
    min_area_m2: float = Field(default=DEFAULT_MIN_AREA_M2, ge=0)
    max_area_m2: float = Field(default=DEFAULT_MAX_AREA_M2, ge=0)
    max_attempts: int = Field(default=MAX_ATTEMPTS, gt=0, le=10_000)
    seed: Optional[int] = None

    @model_validator(mode="after")
    def check_ranges(self) -> "GenerationParams":
        if self.min_length_m > self.max_length_m:
            raise ValueError(
                f"min_length_m ({self.min_length_m}) must not exceed max_length_m ({self.max_length_m})"
            )
        if self.min_area_m2 > self.max_area_m2:
            raise ValueError(
                f"min_area_m2 ({self.min_area_m2}) must not exceed max_area_m2 ({self.max_area_m2})"
            )
        return self

    @property
    def length_range(self) -> MeasureRange:
        return MeasureRange(min=self.min_length_m, max=self.max_length_m)

    @property
    def area_range(self) -> MeasureRange:
        return MeasureRange(min=self.min_area_m2, max=self.max_area_m2)


class BatchSummary(BaseModel):
    geometry_type: GeometryType
    requested: int
    success_count: int
    fail_count: int
    cancelled: bool = False
    warnings: list[str] = Field(default_factory=list)


class SessionState(BaseModel):
    viewport: Optional[BoundingBox] = None
    area_source: AreaSource = "viewport"
    area_geojson: Optional[dict[str, Any]] = None
    area_label: str = ""
    attributes: list[AttributeDefinition] = Field(default_factory=list)
    params: GenerationParams = Field(default_factory=GenerationParams)
    pending_geocode_candidates: list[GeocodeCandidate] = Field(default_factory=list)
    features: list[GeneratedFeature] = Field(default_factory=list)
    last_batch: Optional[BatchSummary] = None

    def reset(self) -> None:
        """Restore every field to its default."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default(call_default_factory=True))

    def clear_results(self) -> None:
        self.features = []
        self.last_batch = None

    def summary(self) -> dict:
        return {
            "area": {
                "source": self.area_source,
                "viewport": self.viewport.as_list() if self.viewport else None,
                "constraint_loaded": self.area_geojson is not None,
                "constraint_label": self.area_label or None,
            },
            "attributes": [
                {"name": a.name, "type": a.type} for a in self.attributes
            ],
            "params": self.params.model_dump(),
            "features": {
                "count": len(self.features),
                "geometry_type": self.features[0].geometry_type if self.features else None,
            },
            "last_batch": self.last_batch.model_dump() if self.last_batch else None,
        }


# Global session state, one per MCP server process
state = SessionState()
